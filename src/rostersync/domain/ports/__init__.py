"""Domain port definitions for adapters."""

from __future__ import annotations

from .assets import AssetTransfer, UploadOptions
from .identity import IdentityDirectory
from .profiles import ProfileStore
from .source import RecordSource

__all__ = [
    "AssetTransfer",
    "IdentityDirectory",
    "ProfileStore",
    "RecordSource",
    "UploadOptions",
]

"""Ports for moving local media files into durable storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True, slots=True)
class UploadOptions:
    content_type: str
    public: bool = True


@runtime_checkable
class AssetTransfer(Protocol):
    """Upload service returning a resolvable URL for the stored object.

    Uploading to an existing ``destination`` overwrites it. Failures raise
    ``AssetTransferError`` (or ``OSError`` for unreadable local files).
    """

    def upload(self, local_path: Path, destination: str, options: UploadOptions) -> str: ...


__all__ = ["AssetTransfer", "UploadOptions"]

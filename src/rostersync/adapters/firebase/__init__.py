"""Public interface for the Firebase REST backend."""

from __future__ import annotations

from .auth import FirebaseIdentityDirectory
from .client import FirebaseAPIError
from .firestore import FirestoreProfileStore, build_write, encode_value
from .storage import CloudStorageAssetTransfer, media_url

__all__ = [
    "CloudStorageAssetTransfer",
    "FirebaseAPIError",
    "FirebaseIdentityDirectory",
    "FirestoreProfileStore",
    "build_write",
    "encode_value",
    "media_url",
]

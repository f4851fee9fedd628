"""In-memory fakes for the reconciliation ports."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import TYPE_CHECKING

from rostersync.domain.errors import AssetTransferError, NotFoundError, ProfileStoreError
from rostersync.domain.model import IdentityRecord, WriteMode
from rostersync.domain.ports import AssetTransfer, IdentityDirectory, ProfileStore

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from rostersync.domain.model import ProfileDocument
    from rostersync.domain.ports import UploadOptions


type CallLog = list[tuple[str, str]]


def make_raw(**overrides: str | None) -> dict[str, str | None]:
    """Build a roster row with sensible student defaults."""

    row: dict[str, str | None] = {
        "email": "a@x.com",
        "uid": "u1",
        "password": "secret-pass",
        "name": "Ada Lovelace",
        "role": "student",
        "imagePath": "",
        "department": "Engineering",
        "branch": "CSE",
        "course": "BTech",
        "year": "2",
        "semester": "4",
        "designation": "",
        "company_type": "",
        "company_location": "",
    }
    row.update(overrides)
    return row


class FakeIdentityDirectory(IdentityDirectory):
    """Identity directory keyed by uid, with email lookups and injectable failures."""

    def __init__(
        self,
        identities: Iterable[IdentityRecord] = (),
        *,
        calls: CallLog | None = None,
    ) -> None:
        self.by_uid: dict[str, IdentityRecord] = {item.uid: item for item in identities}
        self.calls: CallLog = calls if calls is not None else []
        self.created: list[IdentityRecord] = []
        self.updated: list[tuple[str, IdentityRecord]] = []
        self.lookup_errors: dict[str, Exception] = {}
        self.create_errors: dict[str, Exception] = {}

    def lookup_by_email(self, email: str) -> IdentityRecord:
        self.calls.append(("lookup", email))
        if email in self.lookup_errors:
            raise self.lookup_errors[email]
        for identity in self.by_uid.values():
            if identity.email == email:
                return replace(identity, credential=None)
        raise NotFoundError(email)

    def create(self, identity: IdentityRecord) -> IdentityRecord:
        self.calls.append(("create", identity.uid))
        if identity.uid in self.create_errors:
            raise self.create_errors[identity.uid]
        self.created.append(identity)
        self.by_uid[identity.uid] = identity
        return replace(identity, credential=None)

    def update(self, uid: str, changes: IdentityRecord) -> IdentityRecord:
        self.calls.append(("update", uid))
        if uid not in self.by_uid:
            raise NotFoundError(uid)
        self.updated.append((uid, changes))
        del self.by_uid[uid]
        self.by_uid[changes.uid] = changes
        return replace(changes, credential=None)


class FakeProfileStore(ProfileStore):
    """Profile store applying replace/merge semantics to plain dicts."""

    def __init__(
        self,
        documents: dict[str, dict[str, object]] | None = None,
        *,
        calls: CallLog | None = None,
    ) -> None:
        self.documents: dict[str, dict[str, object]] = documents or {}
        self.calls: CallLog = calls if calls is not None else []
        self.writes: list[tuple[str, ProfileDocument, WriteMode]] = []
        self.failing_uids: set[str] = set()

    def upsert(self, uid: str, document: ProfileDocument, mode: WriteMode) -> None:
        self.calls.append(("profile", uid))
        if uid in self.failing_uids:
            raise ProfileStoreError(f"write rejected for {uid}")
        self.writes.append((uid, document, mode))
        fields = document.to_fields()
        if mode is WriteMode.MERGE and uid in self.documents:
            self.documents[uid].update(fields)
        else:
            self.documents[uid] = dict(fields)


class FakeAssetTransfer(AssetTransfer):
    """Asset transfer recording uploads.

    File names in ``failing_names`` raise; ``delays`` slows uploads down per file name.
    """

    def __init__(self, *, calls: CallLog | None = None) -> None:
        self.calls: CallLog = calls if calls is not None else []
        self.uploads: list[tuple[Path, str, UploadOptions]] = []
        self.failing_names: set[str] = set()
        self.delays: dict[str, float] = {}

    def upload(self, local_path: Path, destination: str, options: UploadOptions) -> str:
        self.calls.append(("upload", destination))
        time.sleep(self.delays.get(local_path.name, 0.0))
        if local_path.name in self.failing_names:
            raise AssetTransferError(f"upload of {destination} failed")
        self.uploads.append((local_path, destination, options))
        return f"https://assets.test/{destination}?alt=media"

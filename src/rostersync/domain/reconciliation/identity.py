"""Decide between creating and refreshing the identity behind a roster record."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from rostersync.domain.errors import NotFoundError
from rostersync.domain.model import IdentityAction, IdentityRecord

if TYPE_CHECKING:
    from rostersync.domain.model import UserRecord
    from rostersync.domain.ports.identity import IdentityDirectory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IdentityResolution:
    """Identity key the profile is written under, and how it was reached."""

    uid: str
    action: IdentityAction
    previous_uid: str | None = None


def _same_identity(existing: IdentityRecord, desired: IdentityRecord) -> bool:
    # Credentials are never returned by directories, so a record that sets one
    # can never be proven unchanged.
    return (
        desired.credential is None
        and existing.uid == desired.uid
        and existing.email == desired.email
        and existing.display_name == desired.display_name
    )


@dataclass(slots=True)
class IdentityResolver:
    directory: IdentityDirectory
    refresh_unchanged: bool = True

    def find_existing(self, email: str) -> IdentityRecord | None:
        """Return the identity registered for ``email`` or ``None`` on a lookup miss.

        Any other directory failure propagates as ``DirectoryError``.
        """

        try:
            return self.directory.lookup_by_email(email)
        except NotFoundError:
            return None

    def __call__(self, record: UserRecord) -> IdentityResolution:
        desired = IdentityRecord.from_user(record)
        existing = self.find_existing(record.email)

        if existing is None:
            created = self.directory.create(desired)
            log.debug("Created identity %s for %s", created.uid, record.email)
            return IdentityResolution(uid=created.uid, action=IdentityAction.CREATED)

        if not self.refresh_unchanged and _same_identity(existing, desired):
            log.debug("Identity %s for %s is unchanged", existing.uid, record.email)
            return IdentityResolution(uid=existing.uid, action=IdentityAction.UNCHANGED)

        updated = self.directory.update(existing.uid, desired)
        log.debug("Updated identity %s for %s", updated.uid, record.email)
        return IdentityResolution(
            uid=updated.uid,
            action=IdentityAction.UPDATED,
            previous_uid=existing.uid,
        )

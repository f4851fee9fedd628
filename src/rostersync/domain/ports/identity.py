"""Ports for the identity directory holding authentication accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rostersync.domain.model import IdentityRecord


@runtime_checkable
class IdentityDirectory(Protocol):
    """Keyed store of identities, looked up by email and mutated by uid."""

    def lookup_by_email(self, email: str) -> IdentityRecord:
        """Return the account registered for ``email``.

        Raises ``NotFoundError`` on a miss and ``DirectoryError`` on any other failure.
        """
        ...

    def create(self, identity: IdentityRecord) -> IdentityRecord:
        """Create an account whose primary key is ``identity.uid``."""
        ...

    def update(self, uid: str, changes: IdentityRecord) -> IdentityRecord:
        """Overwrite uid, email, display name and (when given) credential of ``uid``."""
        ...


__all__ = ["IdentityDirectory"]

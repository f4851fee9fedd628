"""Compose role-specific profile documents and write them with the right mode."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rostersync.domain.model import (
    CREATED_AT_FIELD,
    UPDATED_AT_FIELD,
    IdentityAction,
    ProfileDocument,
    WriteMode,
)

from .normalize import ROLE_ATTRIBUTES

if TYPE_CHECKING:
    from rostersync.domain.model import UserRecord
    from rostersync.domain.ports.profiles import ProfileStore

    from .identity import IdentityResolution


def write_mode_for(action: IdentityAction) -> WriteMode:
    """New identities get a fresh document; existing ones are merged into."""

    return WriteMode.REPLACE if action is IdentityAction.CREATED else WriteMode.MERGE


def compose_profile(
    record: UserRecord,
    *,
    image_url: str | None,
    action: IdentityAction,
) -> ProfileDocument:
    allowed = ROLE_ATTRIBUTES[record.role]
    role_attributes = {
        name: value for name, value in record.role_attributes.items() if name in allowed
    }
    timestamp_field = CREATED_AT_FIELD if action is IdentityAction.CREATED else UPDATED_AT_FIELD
    return ProfileDocument(
        uid=record.uid,
        email=record.email,
        role=record.role_label,
        image_url=image_url,
        base=record.base,
        role_attributes=role_attributes,
        timestamp_field=timestamp_field,
    )


@dataclass(slots=True)
class ProfileComposer:
    store: ProfileStore

    def __call__(
        self,
        record: UserRecord,
        *,
        image_url: str | None,
        identity: IdentityResolution,
    ) -> ProfileDocument:
        document = compose_profile(record, image_url=image_url, action=identity.action)
        self.store.upsert(identity.uid, document, write_mode_for(identity.action))
        return document

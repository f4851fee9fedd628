"""Normalized roster entries and the durable records derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from rostersync.domain.errors import ValidationError
from rostersync.domain.model.enums import Role

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


type RawRecord = Mapping[str, str | None]

CREATED_AT_FIELD: Final[str] = "createdAt"
UPDATED_AT_FIELD: Final[str] = "updatedAt"


class ServerTimestamp:
    """Placeholder resolved to the store's own clock when a document is written."""

    _instance: ServerTimestamp | None = None

    def __new__(cls) -> ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP: Final[ServerTimestamp] = ServerTimestamp()


@dataclass(frozen=True, slots=True)
class BaseFields:
    """Organisational fields every profile carries regardless of role."""

    department: str | None = None
    branch: str | None = None
    course: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UserRecord:
    """One roster entry after normalization.

    ``role`` selects which attribute group is meaningful; ``role_attributes`` only
    ever holds the names belonging to that group. ``role_label`` keeps the role
    text exactly as the source spelled it, which is what profiles store.
    """

    email: str
    uid: str
    display_name: str | None = None
    password: str | None = field(default=None, repr=False)
    role: Role = Role.OTHER
    role_label: str | None = None
    base: BaseFields = field(default_factory=BaseFields)
    image_path: Path | None = None
    role_attributes: Mapping[str, str | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.email:
            raise ValidationError("Record is missing an email", field="email")
        if not self.uid:
            raise ValidationError("Record is missing a uid", field="uid")


@dataclass(frozen=True, slots=True, kw_only=True)
class IdentityRecord:
    """Authentication account as held by the identity directory.

    Directories never hand back the credential, so looked-up records carry
    ``credential=None``.
    """

    uid: str
    email: str
    display_name: str | None = None
    credential: str | None = field(default=None, repr=False)

    @classmethod
    def from_user(cls, record: UserRecord) -> IdentityRecord:
        return cls(
            uid=record.uid,
            email=record.email,
            display_name=record.display_name,
            credential=record.password,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ProfileDocument:
    """Profile payload for one uid, flattened into document fields by ``to_fields``."""

    uid: str
    email: str
    role: str | None
    image_url: str | None
    base: BaseFields
    role_attributes: Mapping[str, str | None]
    timestamp_field: str

    def to_fields(self) -> dict[str, object]:
        fields: dict[str, object] = {
            "email": self.email,
            "role": self.role,
            "uid": self.uid,
            "imageUrl": self.image_url,
            "department": self.base.department,
            "branch": self.base.branch,
            "course": self.base.course,
        }
        fields.update(self.role_attributes)
        fields[self.timestamp_field] = SERVER_TIMESTAMP
        return fields

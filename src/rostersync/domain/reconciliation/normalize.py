"""Turn raw roster rows into validated ``UserRecord`` values."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from rostersync.domain.errors import ValidationError
from rostersync.domain.model import BaseFields, Role, UserRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rostersync.domain.model import RawRecord

ROLE_ATTRIBUTES: Final[Mapping[Role, tuple[str, ...]]] = MappingProxyType(
    {
        Role.STUDENT: ("year", "semester"),
        Role.TEACHER: ("designation",),
        Role.COMPANY: ("company_type", "company_location"),
        Role.OTHER: (),
    }
)

REQUIRED_FIELDS: Final[tuple[str, ...]] = ("email", "uid")


def clean_value(raw: RawRecord, key: str) -> str | None:
    """Return the stripped value for ``key``; absent or blank values become ``None``."""

    value = raw.get(key)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def role_attributes_for(role: Role, raw: RawRecord) -> dict[str, str | None]:
    return {name: clean_value(raw, name) for name in ROLE_ATTRIBUTES[role]}


def normalize_record(raw: RawRecord) -> UserRecord:
    """Extract the fixed roster field set from ``raw``.

    Raises ``ValidationError`` when ``email`` or ``uid`` is missing or blank.
    """

    for name in REQUIRED_FIELDS:
        if clean_value(raw, name) is None:
            raise ValidationError(f"Missing required field '{name}'", field=name)

    role_label = clean_value(raw, "role")
    role = Role.parse(role_label)
    image_path = clean_value(raw, "imagePath")

    return UserRecord(
        email=clean_value(raw, "email") or "",
        uid=clean_value(raw, "uid") or "",
        display_name=clean_value(raw, "name"),
        password=clean_value(raw, "password"),
        role=role,
        role_label=role_label,
        base=BaseFields(
            department=clean_value(raw, "department"),
            branch=clean_value(raw, "branch"),
            course=clean_value(raw, "course"),
        ),
        image_path=Path(image_path) if image_path else None,
        role_attributes=role_attributes_for(role, raw),
    )

"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    STUDENT = "student"
    TEACHER = "teacher"
    COMPANY = "company"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> Role:
        """Map free-form role text onto a known role; anything unknown is ``OTHER``."""

        if value is None:
            return cls.OTHER
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER


class WriteMode(StrEnum):
    """How a profile write treats the existing document."""

    REPLACE = "replace"
    MERGE = "merge"


class IdentityAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class FailureKind(StrEnum):
    VALIDATION = "validation"
    DIRECTORY = "directory"
    PROFILE_STORE = "profile_store"
    UNEXPECTED = "unexpected"

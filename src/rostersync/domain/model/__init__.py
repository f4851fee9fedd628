"""Domain model for roster reconciliation."""

from __future__ import annotations

from .enums import FailureKind, IdentityAction, Role, WriteMode
from .user import (
    CREATED_AT_FIELD,
    SERVER_TIMESTAMP,
    UPDATED_AT_FIELD,
    BaseFields,
    IdentityRecord,
    ProfileDocument,
    RawRecord,
    ServerTimestamp,
    UserRecord,
)

__all__ = [
    "CREATED_AT_FIELD",
    "SERVER_TIMESTAMP",
    "UPDATED_AT_FIELD",
    "BaseFields",
    "FailureKind",
    "IdentityAction",
    "IdentityRecord",
    "ProfileDocument",
    "RawRecord",
    "Role",
    "ServerTimestamp",
    "UserRecord",
    "WriteMode",
]

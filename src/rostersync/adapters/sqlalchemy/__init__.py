"""SQLAlchemy adapter package for the local identity directory and profile store."""

from __future__ import annotations

from .database import StartupError, configured_engine, is_started, shutdown, startup
from .mappings import create_all_tables, identity_table, metadata, profile_table
from .stores import (
    SqlAlchemyIdentityDirectory,
    SqlAlchemyProfileStore,
    hash_credential,
    verify_credential,
)

__all__ = [
    "SqlAlchemyIdentityDirectory",
    "SqlAlchemyProfileStore",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "hash_credential",
    "identity_table",
    "is_started",
    "metadata",
    "profile_table",
    "shutdown",
    "startup",
    "verify_credential",
]

"""Ports for persisting profile documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rostersync.domain.model import ProfileDocument, WriteMode


@runtime_checkable
class ProfileStore(Protocol):
    """Document store keyed by uid.

    ``WriteMode.REPLACE`` makes the document exactly the given fields;
    ``WriteMode.MERGE`` overwrites the given fields and keeps every other one.
    Failures raise ``ProfileStoreError``.
    """

    def upsert(self, uid: str, document: ProfileDocument, mode: WriteMode) -> None: ...


__all__ = ["ProfileStore"]

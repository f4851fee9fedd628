"""Ports for reading roster records from a tabular source."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rostersync.domain.model import RawRecord


@runtime_checkable
class RecordSource(Protocol):
    """Finite, ordered, single-pass sequence of raw records.

    Implementations raise ``SourceError`` when the underlying source cannot be read.
    """

    def __iter__(self) -> Iterator[RawRecord]: ...


__all__ = ["RecordSource"]

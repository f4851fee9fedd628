"""Roster records read from a delimited text file."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from rostersync.domain.errors import SourceError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from rostersync.domain.model import RawRecord

log = getLogger(__name__)


@dataclass(slots=True)
class CsvRecordSource:
    """Stream rows of a CSV file as raw records, in file order.

    The header row names the fields. A UTF-8 byte-order mark is tolerated.
    """

    path: Path
    delimiter: str = ","
    encoding: str = "utf-8-sig"

    def __iter__(self) -> Iterator[RawRecord]:
        try:
            with self.path.open(newline="", encoding=self.encoding) as handle:
                reader = csv.DictReader(handle, delimiter=self.delimiter)
                rows = 0
                for row in reader:
                    rows += 1
                    yield {key.strip(): value for key, value in row.items() if key is not None}
                log.info("CSV file %s successfully processed (%s rows)", self.path, rows)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise SourceError(f"Cannot read roster {self.path}: {exc}") from exc

    def read_all(self) -> list[RawRecord]:
        """Materialise every record up front so a broken file fails before any write."""

        return list(self)


if TYPE_CHECKING:
    from pathlib import Path as _Path

    from rostersync.domain.ports.source import RecordSource

    _source_check: RecordSource = CsvRecordSource(_Path())

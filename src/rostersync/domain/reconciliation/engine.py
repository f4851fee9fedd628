"""Sequential, failure-isolating reconciliation of a roster against both stores.

Each record runs normalize → asset → identity → profile on its own. Anything a
record raises is caught at the record boundary and becomes a ``RecordFailure``;
only errors raised while reading the source itself end the run. Writes that
already succeeded for a failing record are not rolled back.
"""

from __future__ import annotations

import threading
from collections.abc import Sized
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from rostersync.domain.errors import RosterSyncError

from .normalize import clean_value, normalize_record
from .report import BatchReport, RecordFailure, RecordSuccess, classify_failure

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from rostersync.domain.model import RawRecord, UserRecord

    from .assets import AssetAssociator
    from .identity import IdentityResolver
    from .profile import ProfileComposer
    from .report import RecordOutcome

log = getLogger(__name__)


class CancellationToken:
    """Thread-safe stop flag checked by the engine between records."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(slots=True)
class ReconciliationEngine:
    """Run every roster record through the reconciliation steps, one at a time."""

    assets: AssetAssociator
    identities: IdentityResolver
    profiles: ProfileComposer
    normalize: Callable[[RawRecord], UserRecord] = normalize_record

    def run(
        self,
        records: Iterable[RawRecord],
        *,
        cancellation: CancellationToken | None = None,
    ) -> BatchReport:
        """Reconcile ``records`` in order and return the batch report."""

        report = BatchReport()
        self.assets.reset()
        total = len(records) if isinstance(records, Sized) else None
        if total is not None:
            log.info("Total users to process: %s", total)

        for index, raw in enumerate(records, start=1):
            if cancellation is not None and cancellation.cancelled:
                log.warning("Stop requested; leaving remaining records from %s unprocessed", index)
                report.cancelled = True
                break
            report.add(self.reconcile_record(index, raw, total=total))

        log.info(
            "Finished processing users: attempted=%s, succeeded=%s, failed=%s, cancelled=%s",
            report.attempted,
            report.succeeded,
            report.failed,
            report.cancelled,
        )
        return report

    def reconcile_record(
        self,
        index: int,
        raw: RawRecord,
        *,
        total: int | None = None,
    ) -> RecordOutcome:
        email = clean_value(raw, "email")
        position = f"{index} of {total}" if total is not None else str(index)
        log.info("Processing user %s: %s", position, email)

        try:
            record = self.normalize(raw)
            image_url = self.assets(record.image_path, email=record.email)
            identity = self.identities(record)
            self.profiles(record, image_url=image_url, identity=identity)
        except Exception as exc:  # noqa: BLE001
            kind = classify_failure(exc)
            if isinstance(exc, RosterSyncError):
                log.error("Error processing user %s (%s): %s", email, kind, exc)  # noqa: TRY400
            else:
                log.exception("Unexpected error processing user %s", email)
            return RecordFailure(index=index, email=email, kind=kind, message=str(exc))

        log.info("Successfully reconciled user %s (%s)", record.email, identity.action)
        return RecordSuccess(
            index=index,
            email=record.email,
            uid=identity.uid,
            action=identity.action,
            image_url=image_url,
        )

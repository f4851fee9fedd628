"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from rostersync.adapters.csv_source import CsvRecordSource
from rostersync.adapters.filesystem import LocalAssetTransfer
from rostersync.adapters.firebase import (
    CloudStorageAssetTransfer,
    FirebaseIdentityDirectory,
    FirestoreProfileStore,
)
from rostersync.adapters.sqlalchemy import (
    SqlAlchemyIdentityDirectory,
    SqlAlchemyProfileStore,
    is_started,
    startup,
)
from rostersync.config import (
    FirebaseConfig,
    ReconcileConfig,
    StorageConfig,
    get_firebase_config,
    get_storage_config,
)
from rostersync.domain.model import IdentityAction
from rostersync.domain.reconciliation import (
    AssetAssociator,
    BatchReport,
    IdentityResolver,
    ProfileComposer,
    ReconciliationEngine,
)

if TYPE_CHECKING:
    from pathlib import Path

    from rostersync.domain.ports import AssetTransfer, IdentityDirectory, ProfileStore
    from rostersync.domain.reconciliation import CancellationToken

type BackendName = Literal["firebase", "sql"]

log = getLogger(__name__)


@dataclass(slots=True)
class Backends:
    """Store and transfer adapters one import run writes through."""

    directory: IdentityDirectory
    profiles: ProfileStore
    assets: AssetTransfer


def build_firebase_backends(config: FirebaseConfig | None = None) -> Backends:
    effective = config or get_firebase_config()
    return Backends(
        directory=FirebaseIdentityDirectory(config=effective),
        profiles=FirestoreProfileStore(config=effective),
        assets=CloudStorageAssetTransfer(config=effective),
    )


def build_sql_backends(
    *,
    database_uri: str | None = None,
    storage: StorageConfig | None = None,
) -> Backends:
    storage_config = (storage or get_storage_config()).prepare()
    if not is_started():
        startup(database_uri=database_uri or storage_config.database_uri)
    return Backends(
        directory=SqlAlchemyIdentityDirectory(),
        profiles=SqlAlchemyProfileStore(),
        assets=LocalAssetTransfer(storage_config.assets_dir),
    )


def build_backends(name: BackendName, *, database_uri: str | None = None) -> Backends:
    if name == "firebase":
        return build_firebase_backends()
    if name == "sql":
        return build_sql_backends(database_uri=database_uri)
    raise ValueError(f"Unsupported backend: {name}")


def build_engine(backends: Backends, config: ReconcileConfig | None = None) -> ReconciliationEngine:
    effective = config or ReconcileConfig()
    return ReconciliationEngine(
        assets=AssetAssociator(
            backends.assets,
            prefix=effective.asset_prefix,
            default_content_type=effective.default_content_type,
        ),
        identities=IdentityResolver(
            backends.directory,
            refresh_unchanged=effective.refresh_unchanged_identities,
        ),
        profiles=ProfileComposer(backends.profiles),
    )


def import_roster(
    csv_path: Path,
    *,
    backend: BackendName = "firebase",
    backends: Backends | None = None,
    config: ReconcileConfig | None = None,
    delimiter: str = ",",
    database_uri: str | None = None,
    cancellation: CancellationToken | None = None,
) -> BatchReport:
    """Reconcile every row of ``csv_path`` against the configured stores."""

    records = CsvRecordSource(csv_path, delimiter=delimiter).read_all()
    effective_backends = backends or build_backends(backend, database_uri=database_uri)
    engine = build_engine(effective_backends, config)

    log.info("Starting roster import: source=%s, backend=%s", csv_path, backend)
    report = engine.run(records, cancellation=cancellation)
    log.info(
        "Finished roster import: created=%s, updated=%s, failed=%s",
        report.count(IdentityAction.CREATED),
        report.count(IdentityAction.UPDATED),
        report.failed,
    )
    return report

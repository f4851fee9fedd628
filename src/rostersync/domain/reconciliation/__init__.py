"""Record reconciliation: normalizer, asset associator, identity resolver, profile composer."""

from __future__ import annotations

from .assets import AssetAssociator
from .engine import CancellationToken, ReconciliationEngine
from .identity import IdentityResolution, IdentityResolver
from .normalize import ROLE_ATTRIBUTES, normalize_record
from .profile import ProfileComposer, compose_profile, write_mode_for
from .report import (
    BatchReport,
    RecordFailure,
    RecordOutcome,
    RecordSuccess,
    classify_failure,
)

__all__ = [
    "ROLE_ATTRIBUTES",
    "AssetAssociator",
    "BatchReport",
    "CancellationToken",
    "IdentityResolution",
    "IdentityResolver",
    "ProfileComposer",
    "ReconciliationEngine",
    "RecordFailure",
    "RecordOutcome",
    "RecordSuccess",
    "classify_failure",
    "compose_profile",
    "normalize_record",
    "write_mode_for",
]

"""Reconciliation defaults for roster imports."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ASSET_PREFIX = "faces"
DEFAULT_ASSET_CONTENT_TYPE = "image/jpeg"


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    asset_prefix: str = DEFAULT_ASSET_PREFIX
    default_content_type: str = DEFAULT_ASSET_CONTENT_TYPE
    # Re-write identities even when nothing comparable changed.
    refresh_unchanged_identities: bool = True


def get_reconcile_config(*, skip_unchanged: bool = False) -> ReconcileConfig:
    return ReconcileConfig(refresh_unchanged_identities=not skip_unchanged)

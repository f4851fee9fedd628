"""Error taxonomy shared by the reconciliation core and its adapters."""

from __future__ import annotations


class RosterSyncError(Exception):
    """Base class for errors raised while reconciling a roster."""


class ValidationError(RosterSyncError):
    """A source record lacks a required field or carries an unusable value."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(RosterSyncError):
    """The identity directory holds no account for the requested key."""


class DirectoryError(RosterSyncError):
    """The identity directory failed for a reason other than a lookup miss."""


class AssetTransferError(RosterSyncError):
    """A media asset could not be uploaded to durable storage."""


class ProfileStoreError(RosterSyncError):
    """A profile document could not be written."""


class SourceError(RosterSyncError):
    """The record source itself cannot be read; fatal to the whole run."""

"""Per-record outcomes and the batch report accumulated from them."""

from __future__ import annotations

from dataclasses import dataclass, field

from rostersync.domain.errors import (
    DirectoryError,
    NotFoundError,
    ProfileStoreError,
    ValidationError,
)
from rostersync.domain.model import FailureKind, IdentityAction


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordSuccess:
    index: int
    email: str
    uid: str
    action: IdentityAction
    image_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordFailure:
    index: int
    email: str | None
    kind: FailureKind
    message: str


type RecordOutcome = RecordSuccess | RecordFailure


def classify_failure(exc: BaseException) -> FailureKind:
    """Map an exception raised while reconciling one record onto a failure kind."""

    if isinstance(exc, ValidationError):
        return FailureKind.VALIDATION
    if isinstance(exc, DirectoryError | NotFoundError):
        return FailureKind.DIRECTORY
    if isinstance(exc, ProfileStoreError):
        return FailureKind.PROFILE_STORE
    return FailureKind.UNEXPECTED


@dataclass(slots=True)
class BatchReport:
    """Summary of one reconciliation pass.

    ``attempted`` always equals ``succeeded + failed``; records left unread after a
    cancellation are not counted.
    """

    successes: list[RecordSuccess] = field(default_factory=list["RecordSuccess"])
    failures: list[RecordFailure] = field(default_factory=list["RecordFailure"])
    cancelled: bool = False

    def add(self, outcome: RecordOutcome) -> None:
        if isinstance(outcome, RecordSuccess):
            self.successes.append(outcome)
        else:
            self.failures.append(outcome)

    @property
    def succeeded(self) -> int:
        return len(self.successes)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def attempted(self) -> int:
        return self.succeeded + self.failed

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled

    def count(self, action: IdentityAction) -> int:
        return sum(1 for success in self.successes if success.action is action)

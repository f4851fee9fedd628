"""Helpers shared by the Firebase REST adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from .schema import ErrorResponse

if TYPE_CHECKING:
    import httpx

log = getLogger(__name__)


class FirebaseAPIError(RuntimeError):
    """Raised when a Firebase REST endpoint answers with an error payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


def read_payload(response: httpx.Response) -> object:
    """Return the decoded JSON body of a successful response or raise ``FirebaseAPIError``."""

    if response.is_success:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise FirebaseAPIError(
                "Firebase returned a non-JSON payload", status_code=response.status_code
            ) from exc

    try:
        error = ErrorResponse.model_validate(response.json()).error
    except (ValueError, PydanticValidationError):
        raise FirebaseAPIError(
            f"HTTP {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        ) from None

    log.debug("Firebase API error %s: %s", error.code, error.message)
    raise FirebaseAPIError(error.message, status_code=error.code, reason=error.reason)

"""Profile store backed by the Cloud Firestore REST API."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final, cast

import httpx
from pydantic import ValidationError as PydanticValidationError

from rostersync.adapters.http_resilience import ClientFactory, ResilientClient
from rostersync.config.firebase import FirebaseConfig, get_firebase_config
from rostersync.domain.errors import ProfileStoreError
from rostersync.domain.model import ServerTimestamp, WriteMode
from rostersync.domain.ports.profiles import ProfileStore

from .client import FirebaseAPIError, read_payload
from .schema import CommitResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from rostersync.config.http_resilience import ResilienceConfig
    from rostersync.domain.model import ProfileDocument

log = getLogger(__name__)

_SIMPLE_FIELD_NAME: Final = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")


def quote_field_path(name: str) -> str:
    """Quote a field name for use in a Firestore field path."""

    if _SIMPLE_FIELD_NAME.match(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def encode_value(value: object) -> dict[str, object]:
    """Encode a Python value as a Firestore REST ``Value``."""

    if value is None:
        return {"nullValue": "NULL_VALUE"}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=UTC)
        return {"timestampValue": moment.astimezone(UTC).isoformat().replace("+00:00", "Z")}
    if isinstance(value, Mapping):
        mapping = cast("Mapping[str, object]", value)
        return {"mapValue": {"fields": {str(k): encode_value(v) for k, v in mapping.items()}}}
    if isinstance(value, Sequence):
        items = cast("Sequence[object]", value)
        return {"arrayValue": {"values": [encode_value(item) for item in items]}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def build_write(
    document_name: str,
    fields: Mapping[str, object],
    mode: WriteMode,
) -> dict[str, object]:
    """Build one ``Write`` for ``documents:commit``.

    Server timestamps become ``REQUEST_TIME`` transforms. A merge carries an update
    mask of the written fields so every other field survives; a replace carries
    none, which makes the given fields the whole document.
    """

    plain = {
        name: value for name, value in fields.items() if not isinstance(value, ServerTimestamp)
    }
    stamped = [name for name, value in fields.items() if isinstance(value, ServerTimestamp)]

    write: dict[str, object] = {
        "update": {
            "name": document_name,
            "fields": {name: encode_value(value) for name, value in plain.items()},
        }
    }
    if mode is WriteMode.MERGE:
        write["updateMask"] = {"fieldPaths": [quote_field_path(name) for name in plain]}
    if stamped:
        write["updateTransforms"] = [
            {"fieldPath": quote_field_path(name), "setToServerValue": "REQUEST_TIME"}
            for name in stamped
        ]
    return write


@dataclass(slots=True)
class FirestoreProfileStore:
    config: FirebaseConfig = field(default_factory=get_firebase_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default_factory=ClientFactory
    )

    @property
    def _database_path(self) -> str:
        return f"projects/{self.config.project_id}/databases/{self.config.database_id}"

    def document_name(self, uid: str) -> str:
        return f"{self._database_path}/documents/{self.config.profile_collection}/{uid}"

    def upsert(self, uid: str, document: ProfileDocument, mode: WriteMode) -> None:
        try:
            write = build_write(self.document_name(uid), document.to_fields(), mode)
        except TypeError as exc:
            raise ProfileStoreError(f"Cannot encode profile {uid}: {exc}") from exc
        asyncio.run(self._commit_async(uid, write))

    async def _commit_async(self, uid: str, write: dict[str, object]) -> None:
        try:
            async with self.client_factory(self.config.firestore_resilience()) as client:
                response = await client.post(
                    f"{self._database_path}/documents:commit",
                    json={"writes": [write]},
                )
            result = CommitResponse.model_validate(read_payload(response))
        except (httpx.HTTPError, FirebaseAPIError, PydanticValidationError) as exc:
            raise ProfileStoreError(f"Profile write failed for {uid}: {exc}") from exc
        log.debug("Committed profile %s at %s", uid, result.commit_time)


if TYPE_CHECKING:
    _store_check: ProfileStore = FirestoreProfileStore()

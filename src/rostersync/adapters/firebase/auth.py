"""Identity directory backed by the Firebase Identity Toolkit admin REST API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PydanticValidationError

from rostersync.adapters.http_resilience import ClientFactory, ResilientClient
from rostersync.config.firebase import FirebaseConfig, get_firebase_config
from rostersync.domain.errors import DirectoryError, NotFoundError
from rostersync.domain.model import IdentityRecord
from rostersync.domain.ports.identity import IdentityDirectory

from .client import FirebaseAPIError, read_payload
from .schema import AccountResponse, LookupResponse, UserInfo

if TYPE_CHECKING:
    from collections.abc import Callable

    from rostersync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

USER_NOT_FOUND = "USER_NOT_FOUND"


def _to_identity(user: UserInfo | AccountResponse, *, fallback_email: str) -> IdentityRecord:
    return IdentityRecord(
        uid=user.local_id,
        email=user.email or fallback_email,
        display_name=user.display_name,
    )


def _account_body(identity: IdentityRecord) -> dict[str, object]:
    body: dict[str, object] = {"localId": identity.uid, "email": identity.email}
    if identity.display_name is not None:
        body["displayName"] = identity.display_name
    if identity.credential is not None:
        body["password"] = identity.credential
    return body


@dataclass(slots=True)
class FirebaseIdentityDirectory:
    config: FirebaseConfig = field(default_factory=get_firebase_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default_factory=ClientFactory
    )

    def lookup_by_email(self, email: str) -> IdentityRecord:
        return asyncio.run(self._lookup_async(email))

    def create(self, identity: IdentityRecord) -> IdentityRecord:
        return asyncio.run(self._create_async(identity))

    def update(self, uid: str, changes: IdentityRecord) -> IdentityRecord:
        if changes.uid != uid:
            raise DirectoryError(
                f"Identity Toolkit cannot change uid {uid!r} to {changes.uid!r} for {changes.email}"
            )
        return asyncio.run(self._update_async(uid, changes))

    @property
    def _accounts_path(self) -> str:
        return f"projects/{self.config.project_id}/accounts"

    async def _lookup_async(self, email: str) -> IdentityRecord:
        try:
            payload = await self._post(f"{self._accounts_path}:lookup", {"email": [email]})
        except FirebaseAPIError as exc:
            if exc.reason == USER_NOT_FOUND:
                raise NotFoundError(f"No identity registered for {email}") from exc
            raise DirectoryError(f"Identity lookup failed for {email}: {exc}") from exc

        try:
            users = LookupResponse.model_validate(payload).users
        except PydanticValidationError as exc:
            raise DirectoryError(f"Unexpected lookup payload for {email}") from exc
        if not users:
            raise NotFoundError(f"No identity registered for {email}")
        return _to_identity(users[0], fallback_email=email)

    async def _create_async(self, identity: IdentityRecord) -> IdentityRecord:
        try:
            payload = await self._post(self._accounts_path, _account_body(identity))
            account = AccountResponse.model_validate(payload)
        except (FirebaseAPIError, PydanticValidationError) as exc:
            raise DirectoryError(f"Identity create failed for {identity.email}: {exc}") from exc
        log.debug("Identity Toolkit created account %s", account.local_id)
        return _to_identity(account, fallback_email=identity.email)

    async def _update_async(self, uid: str, changes: IdentityRecord) -> IdentityRecord:
        body = _account_body(changes)
        if changes.display_name is None:
            body["deleteAttribute"] = ["DISPLAY_NAME"]
        try:
            payload = await self._post(f"{self._accounts_path}:update", body)
            account = AccountResponse.model_validate(payload)
        except (FirebaseAPIError, PydanticValidationError) as exc:
            raise DirectoryError(f"Identity update failed for {changes.email}: {exc}") from exc
        return _to_identity(account, fallback_email=changes.email)

    async def _post(self, path: str, body: dict[str, object]) -> object:
        try:
            async with self.client_factory(self.config.identity_resilience()) as client:
                response = await client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise DirectoryError(f"Identity Toolkit request failed: {exc}") from exc
        return read_payload(response)


if TYPE_CHECKING:
    _directory_check: IdentityDirectory = FirebaseIdentityDirectory()

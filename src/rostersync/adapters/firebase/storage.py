"""Asset transfer backed by the Cloud Storage JSON upload API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from rostersync.adapters.http_resilience import ClientFactory, ResilientClient
from rostersync.config.firebase import FirebaseConfig, get_firebase_config
from rostersync.domain.errors import AssetTransferError
from rostersync.domain.ports.assets import AssetTransfer

from .client import FirebaseAPIError, read_payload
from .schema import StorageObject

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from rostersync.config.http_resilience import ResilienceConfig
    from rostersync.domain.ports.assets import UploadOptions

log = getLogger(__name__)


def media_url(host: str, bucket: str, object_name: str) -> str:
    """Public download URL Firebase serves for ``object_name`` in ``bucket``."""

    return f"https://{host}/v0/b/{bucket}/o/{quote(object_name, safe='')}?alt=media"


@dataclass(slots=True)
class CloudStorageAssetTransfer:
    config: FirebaseConfig = field(default_factory=get_firebase_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default_factory=ClientFactory
    )

    def upload(self, local_path: Path, destination: str, options: UploadOptions) -> str:
        try:
            content = local_path.read_bytes()
        except (OSError, ValueError) as exc:
            raise AssetTransferError(f"Cannot read {local_path!r}: {exc}") from exc
        stored = asyncio.run(self._upload_async(content, destination, options))
        return media_url(self.config.download_host, stored.bucket, stored.name)

    async def _upload_async(
        self,
        content: bytes,
        destination: str,
        options: UploadOptions,
    ) -> StorageObject:
        params: dict[str, str] = {"uploadType": "media", "name": destination}
        if options.public:
            params["predefinedAcl"] = "publicRead"

        bucket = quote(self.config.storage_bucket, safe="")
        try:
            async with self.client_factory(self.config.storage_resilience()) as client:
                response = await client.post(
                    f"b/{bucket}/o",
                    params=params,
                    content=content,
                    headers={"Content-Type": options.content_type},
                )
            stored = StorageObject.model_validate(read_payload(response))
        except (httpx.HTTPError, FirebaseAPIError, PydanticValidationError) as exc:
            raise AssetTransferError(f"Upload of {destination} failed: {exc}") from exc
        log.debug("Stored %s in bucket %s", stored.name, stored.bucket)
        return stored


if TYPE_CHECKING:
    _transfer_check: AssetTransfer = CloudStorageAssetTransfer()

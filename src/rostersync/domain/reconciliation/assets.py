"""Associate an optional local image with a durable, publicly resolvable URL."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from rostersync.config.reconcile import DEFAULT_ASSET_CONTENT_TYPE, DEFAULT_ASSET_PREFIX
from rostersync.domain.ports.assets import UploadOptions

if TYPE_CHECKING:
    from pathlib import Path

    from rostersync.domain.ports.assets import AssetTransfer

log = getLogger(__name__)


@dataclass(slots=True)
class AssetAssociator:
    """Upload images under ``<prefix>/<basename>`` and hand back their URL.

    Upload failures of any kind are logged and resolve to ``None``; they never
    fail a record. Successful uploads are remembered for the current pass so a path
    shared by several rows is transferred once.
    """

    transfer: AssetTransfer
    prefix: str = DEFAULT_ASSET_PREFIX
    default_content_type: str = DEFAULT_ASSET_CONTENT_TYPE
    _resolved: dict[Path, str] = field(default_factory=dict, init=False, repr=False)

    def destination_for(self, image_path: Path) -> str:
        prefix = self.prefix.strip("/")
        return f"{prefix}/{image_path.name}" if prefix else image_path.name

    def content_type_for(self, image_path: Path) -> str:
        guessed, _encoding = mimetypes.guess_type(image_path.name)
        return guessed or self.default_content_type

    def reset(self) -> None:
        """Forget URLs resolved during a previous pass."""

        self._resolved.clear()

    def __call__(self, image_path: Path | None, *, email: str) -> str | None:
        if image_path is None:
            return None

        cached = self._resolved.get(image_path)
        if cached is not None:
            return cached

        destination = self.destination_for(image_path)
        options = UploadOptions(content_type=self.content_type_for(image_path), public=True)
        try:
            url = self.transfer.upload(image_path, destination, options)
        except Exception:  # noqa: BLE001
            log.warning("Error uploading image for %s from %s", email, image_path, exc_info=True)
            return None

        log.info("Successfully uploaded image for %s", email)
        self._resolved[image_path] = url
        return url

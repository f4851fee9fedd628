"""Asset transfer that stores uploads under the local data directory."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from rostersync.domain.errors import AssetTransferError

if TYPE_CHECKING:
    from rostersync.domain.ports.assets import UploadOptions

log = getLogger(__name__)


@dataclass(slots=True)
class LocalAssetTransfer:
    """Copy files into ``root``; the destination name is kept as a relative path."""

    root: Path

    def target_for(self, destination: str) -> Path:
        relative = PurePosixPath(destination)
        if relative.is_absolute() or ".." in relative.parts:
            raise AssetTransferError(f"Refusing to store asset outside {self.root}: {destination}")
        return self.root.joinpath(*relative.parts)

    def upload(self, local_path: Path, destination: str, options: UploadOptions) -> str:
        target = self.target_for(destination)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(local_path, target)
        except ValueError as exc:
            raise AssetTransferError(f"Cannot copy {local_path!r}: {exc}") from exc
        log.debug("Copied %s to %s (%s)", local_path, target, options.content_type)
        return target.resolve().as_uri()


if TYPE_CHECKING:
    from rostersync.domain.ports.assets import AssetTransfer

    _transfer_check: AssetTransfer = LocalAssetTransfer(Path())

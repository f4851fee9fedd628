"""Local locations used by the SQL backend and the filesystem asset store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

DEFAULT_DATA_DIR: Final[str] = "~/.rostersync"
DATABASE_FILENAME: Final[str] = "roster.sqlite3"
ASSETS_DIRNAME: Final[str] = "assets"


def sqlite_uri(path: Path) -> str:
    return f"sqlite+pysqlite:///{path}"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Resolved storage locations.

    ``database_uri`` may point anywhere SQLAlchemy can reach; the default is a
    SQLite file inside ``data_dir``. Call ``prepare`` before writing.
    """

    data_dir: Path
    assets_dir: Path
    database_uri: str

    @classmethod
    def under(cls, data_dir: Path) -> StorageConfig:
        """Default layout rooted at ``data_dir``."""

        root = data_dir.expanduser().resolve()
        return cls(
            data_dir=root,
            assets_dir=root / ASSETS_DIRNAME,
            database_uri=sqlite_uri(root / DATABASE_FILENAME),
        )

    def prepare(self) -> StorageConfig:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.assets_dir.mkdir(parents=True, exist_ok=True)
        return self


def get_storage_config() -> StorageConfig:
    """Read ``ROSTERSYNC_DATA_DIR``, ``ROSTERSYNC_ASSETS_DIR`` and ``DATABASE_URI``."""

    defaults = StorageConfig.under(Path(optional_env_var("ROSTERSYNC_DATA_DIR", DEFAULT_DATA_DIR)))
    assets_dir = optional_env_var("ROSTERSYNC_ASSETS_DIR", "")
    return StorageConfig(
        data_dir=defaults.data_dir,
        assets_dir=Path(assets_dir).expanduser().resolve() if assets_dir else defaults.assets_dir,
        database_uri=optional_env_var("DATABASE_URI", defaults.database_uri),
    )

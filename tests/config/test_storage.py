from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from rostersync.config import storage


def test_storage_config_defaults_live_under_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("ROSTERSYNC_DATA_DIR", str(custom))
    monkeypatch.delenv("ROSTERSYNC_ASSETS_DIR", raising=False)
    monkeypatch.delenv("DATABASE_URI", raising=False)

    config = storage.get_storage_config()

    assert config.data_dir == custom.resolve()
    assert config.assets_dir == custom.resolve() / storage.ASSETS_DIRNAME
    assert config.database_uri == (
        f"sqlite+pysqlite:///{custom.resolve() / storage.DATABASE_FILENAME}"
    )
    assert not custom.exists()


def test_storage_config_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ROSTERSYNC_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ROSTERSYNC_ASSETS_DIR", str(tmp_path / "faces"))
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    config = storage.get_storage_config()

    assert config.assets_dir == (tmp_path / "faces").resolve()
    assert config.database_uri == "sqlite:///override.db"


def test_prepare_creates_directories(tmp_path: Path) -> None:
    config = storage.StorageConfig.under(tmp_path / "data")

    assert config.prepare() is config

    assert config.data_dir.is_dir()
    assert config.assets_dir.is_dir()

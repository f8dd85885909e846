"""Tests for application settings."""

from pathlib import Path

from drg_explorer.config import SOURCE_DATASET, Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("LOAD_BATCH_SIZE", raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url.startswith("sqlite+aiosqlite:///")
    assert settings.database_url.endswith("medicare_ip.db")
    assert settings.source_member == f"{SOURCE_DATASET}.csv"
    assert settings.source_archive.name == f"{SOURCE_DATASET}.zip"
    assert settings.load_batch_size == 1000


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/medicare")
    monkeypatch.setenv("SOURCE_ARCHIVE", str(tmp_path / "other.zip"))
    monkeypatch.setenv("LOAD_BATCH_SIZE", "250")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test,http://b.test")

    settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql+asyncpg://u:p@db/medicare"
    assert settings.source_archive == Path(tmp_path / "other.zip")
    assert settings.load_batch_size == 250
    assert settings.cors_origins == "http://a.test,http://b.test"

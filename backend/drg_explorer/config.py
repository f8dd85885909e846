"""Application configuration using pydantic-settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


# Find .env file: check backend dir first, then project root
_BACKEND_DIR = Path(__file__).parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _BACKEND_DIR / ".env" if (_BACKEND_DIR / ".env").exists() else _PROJECT_ROOT / ".env"

SOURCE_DATASET = "Medicare_IP_Hospitals_by_Geography_and_Service_2023"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The database URL may point at any SQLAlchemy async driver. The default
    is a SQLite file under ``data/`` that the import script populates.
    """

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Record store
    database_url: str = f"sqlite+aiosqlite:///{_PROJECT_ROOT / 'data' / 'medicare_ip.db'}"

    # ETL source (CMS public use file, shipped as a ZIP with one CSV inside)
    source_archive: Path = _PROJECT_ROOT / f"{SOURCE_DATASET}.zip"
    source_member: str = f"{SOURCE_DATASET}.csv"
    load_batch_size: int = 1000

    # Comma-separated list of allowed frontend origins
    cors_origins: str = "http://localhost:3000"

    # Application
    log_level: str = "INFO"
    debug: bool = False


settings = Settings()

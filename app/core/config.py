"""Application configuration from environment."""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Lingua Quest"
    debug: bool = False

    # Database (async driver; alembic converts to a sync url)
    database_url: str = "sqlite+aiosqlite:///./lingua_quest.db"
    create_tables_on_startup: bool = True
    seed_on_startup: bool = True

    # JWT bearer sessions
    secret_key: str = "change-me-in-production-use-env"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()

# blobcheck/core/settings.py
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class Settings(BaseSettings):
    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: list[str] = ["*"]

    # --- Storage ---
    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_BYTES: int = 100 * MIB

    # --- Observability ---
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="BLOBCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance (leest env + .env)."""
    return Settings()

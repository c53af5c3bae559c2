"""Environment-based configuration for LandX."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from LANDX_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LANDX_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8083

    # Authentication (None = disabled)
    api_key: str | None = None

    # Concurrency
    max_concurrent: int = Field(default=4, ge=1)

    # Input limits
    max_file_size: int = Field(default=26_214_400, ge=1)

    # Where uploads are spooled while being verified (None = system temp dir)
    upload_dir: str | None = None


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()

"""
Application settings for Critpath.

Values are read from environment variables prefixed with ``CRITPATH_``
(or from a local ``.env`` file).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CRITPATH_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = "sqlite+aiosqlite:///./critpath.db"
    debug: bool = False

    # Logging
    log_level: str | None = None
    log_json: bool = False

    # Image lookup (Pexels)
    pexels_api_key: str = ""
    pexels_base_url: str = "https://api.pexels.com/v1"
    image_lookup_timeout: float = 10.0


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()

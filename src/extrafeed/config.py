"""Library configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSettings(BaseSettings):
    """Settings loaded from EXTRAFEED_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EXTRAFEED_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Root of the spreadsheets feed; resource paths are appended to it
    feed_url: str = "https://spreadsheets.google.com/feeds/"

    # HTTP timeout in seconds
    timeout: float = 60.0

    # Bytes read per chunk when streaming local feed documents
    chunk_size: int = 65536


@lru_cache
def get_settings() -> FeedSettings:
    """Get cached settings instance."""
    return FeedSettings()

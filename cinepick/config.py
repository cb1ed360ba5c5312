"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_env: Literal["development", "production", "test"] = "development"
    app_name: str = "Cinepick"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None

    # Database
    database_url: str = "sqlite+aiosqlite:///cinepick.db"

    # Redis (optional response cache)
    redis_url: RedisDsn | None = None

    # TMDB
    tmdb_api_read_access_token: str = ""
    tmdb_api_key: str = ""
    tmdb_language: str = "en-US"

    # Streaming availability is resolved for a single region
    streaming_region: str = "US"

    @field_validator("streaming_region")
    @classmethod
    def validate_streaming_region(cls, v: str) -> str:
        """Normalize to an ISO 3166-1 alpha-2 code."""
        v = v.strip().upper()
        if len(v) != 2 or not v.isalpha():
            raise ValueError("STREAMING_REGION must be an ISO 3166-1 alpha-2 code")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def has_tmdb_credentials(self) -> bool:
        """Check whether any TMDB credential is configured."""
        return bool(self.tmdb_api_read_access_token or self.tmdb_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

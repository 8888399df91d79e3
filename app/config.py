"""
Application configuration using Pydantic Settings.

Centralizes all environment variables and app settings.
Using Pydantic BaseSettings gives us validation and type safety for config.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    All configurable values should live here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined here
    )

    # Application
    app_name: str = "Event Scheduler API"
    debug: bool = False
    log_level: str = "INFO"

    # MongoDB - Motor (async driver) connection string
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "event_scheduler_db"

    # Consolidation - how many times to retry deleting superseded events
    merge_delete_attempts: int = 3

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        if not isinstance(v, str):
            return v
        return v.strip().upper() or "INFO"

    @field_validator("merge_delete_attempts")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("merge_delete_attempts must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.
    Using lru_cache avoids re-reading .env on every request.
    """
    return Settings()

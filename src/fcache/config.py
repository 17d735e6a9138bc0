"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_extension(ext: str) -> str:
    """Return ext with exactly one leading period, or "" for no extension."""
    ext = ext.strip().lstrip(".")
    return f".{ext}" if ext else ""


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional:
        CACHE_DIR: Root directory of the cache store
        CACHE_LIFE: Default entry lifetime in seconds
        DEFAULT_EXTENSION: Extension used by find_file when none is given
        LOG_LEVEL: Logging level
        LOG_FILE: Optional JSON Lines log file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Store
    CACHE_DIR: Path = Field(default=Path(".cache"), description="Cache root directory")
    CACHE_LIFE: int = Field(
        default=60, ge=0, description="Default cache lifetime in seconds"
    )
    DEFAULT_EXTENSION: str = Field(
        default=".py", description="Default extension for file lookups"
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON Lines log file")

    @field_validator("DEFAULT_EXTENSION")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Make sure a non-empty extension starts with a single period."""
        return normalize_extension(v)

    def redacted_display(self) -> dict[str, str | int | None]:
        """Return settings as display-ready values."""
        return {
            "CACHE_DIR": str(self.CACHE_DIR),
            "CACHE_LIFE": self.CACHE_LIFE,
            "DEFAULT_EXTENSION": self.DEFAULT_EXTENSION,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

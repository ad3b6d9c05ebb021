"""
Configuration management using pydantic-settings.

Loads cache options from environment variables and .env files.
Validates ranges and provides typed access to settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ttlstore.types import (
    DEFAULT_EXPIRATION_INTERVAL,
    DEFAULT_TTL_SECONDS,
    ExpirationPolicy,
)


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional:
        CACHE_DB_PATH: SQLite database file backing the cache
        CACHE_DISABLE: Bypass the cache entirely (development/test mode)
        CACHE_EXPIRATION_INTERVAL: Seconds between background sweeps
        CACHE_EXPIRE_ON_GET: Sweep before every get instead of on a timer
        CACHE_DEFAULT_TTL: TTL in seconds when put() is given none
        LOG_LEVEL: Logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    CACHE_DB_PATH: Path = Field(
        default=Path(".cache/cache.db"), description="SQLite cache database"
    )

    # Expiration policy
    CACHE_DISABLE: bool = Field(default=False, description="Disable the cache")
    CACHE_EXPIRATION_INTERVAL: int = Field(
        default=DEFAULT_EXPIRATION_INTERVAL,
        ge=1,
        description="Seconds between background expiration sweeps",
    )
    CACHE_EXPIRE_ON_GET: bool = Field(
        default=False,
        description="Expire objects before every get; no background sweep",
    )
    CACHE_DEFAULT_TTL: int = Field(
        default=DEFAULT_TTL_SECONDS, ge=1, description="Default TTL in seconds"
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    @property
    def db_path(self) -> Path:
        """Get the database path (lowercase alias)."""
        return self.CACHE_DB_PATH

    @property
    def disable(self) -> bool:
        """Get the disable flag (lowercase alias)."""
        return self.CACHE_DISABLE

    @property
    def cache_expiration_interval(self) -> int:
        """Get the sweep interval (lowercase alias)."""
        return self.CACHE_EXPIRATION_INTERVAL

    @property
    def expire_on_get(self) -> bool:
        """Get the lazy expiration flag (lowercase alias)."""
        return self.CACHE_EXPIRE_ON_GET

    @property
    def default_ttl(self) -> int:
        """Get the default TTL (lowercase alias)."""
        return self.CACHE_DEFAULT_TTL

    @property
    def policy(self) -> ExpirationPolicy:
        """Expiration policy implied by the disable/expire_on_get flags."""
        return ExpirationPolicy.from_options(
            disable=self.CACHE_DISABLE,
            expire_on_get=self.CACHE_EXPIRE_ON_GET,
        )

    def display(self) -> dict[str, str | int | bool]:
        """Return settings as plain values for logging."""
        return {
            "CACHE_DB_PATH": str(self.CACHE_DB_PATH),
            "CACHE_DISABLE": self.CACHE_DISABLE,
            "CACHE_EXPIRATION_INTERVAL": self.CACHE_EXPIRATION_INTERVAL,
            "CACHE_EXPIRE_ON_GET": self.CACHE_EXPIRE_ON_GET,
            "CACHE_DEFAULT_TTL": self.CACHE_DEFAULT_TTL,
            "LOG_LEVEL": self.LOG_LEVEL,
            "policy": self.policy.value,
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

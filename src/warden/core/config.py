"""Configuration management for Warden.

Settings are loaded with Pydantic Settings from environment variables
(prefixed with ``WARDEN_``) and an optional ``.env`` file. They are read once
at startup and treated as immutable afterwards.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WARDEN_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Warden"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "production"
    api_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/warden.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False
    run_migrations_on_startup: bool = Field(
        default=True,
        description="Apply pending schema migrations before serving traffic",
    )

    # Security Settings
    secret_key: str | None = Field(
        default=None,
        description="Secret key for session token signing",
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Ensure the API prefix starts with a slash and has no trailing one."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @field_validator("secret_key")
    @classmethod
    def empty_secret_is_unset(cls, v: str | None) -> str | None:
        """Treat an empty secret the same as a missing one."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()

"""Configuration management for TemplateSync.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once per process
and is immutable afterwards.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables prefixed with
    ``TEMPLATESYNC_`` and from an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TEMPLATESYNC_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "TemplateSync"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "production"

    # API Settings
    api_key: str = Field(
        default="",
        description="SendGrid API key used as a bearer token",
    )
    api_base_url: str = "https://api.sendgrid.com/v3"
    request_timeout_seconds: float = 30.0

    # Rate Limiting Settings
    create_rate_interval_seconds: float = 5.0
    delete_rate_interval_seconds: float = 5.0

    # Reconciliation Settings
    poll_interval_seconds: float = 2.0
    create_timeout_seconds: float = 1200.0  # 20 minutes
    continuous_target_occurrence: int = Field(default=3, ge=1)
    delete_retries: int = Field(default=5, ge=1)
    version_retries: int = Field(default=5, ge=1)
    strict_delete: bool = Field(
        default=False,
        description="Raise on delete failures instead of reporting a failed result",
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended directly."""
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and reused for the lifetime of the process.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()

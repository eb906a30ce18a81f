"""
Centralized configuration management for ClawPress.

This module provides a unified configuration system with support for:
- Environment variables
- Integration settings (reserved credential name, flash lifetimes)
- Security settings for nonces and capabilities
- Validation using Pydantic

Values read from the environment go through the same validators as values
passed explicitly, so a bad ``LOG_LEVEL`` or a blank reserved name fails at
load time.
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    APP_ID,
    APP_PASSWORD_NAME,
    FLASH_PREFIX,
    META_KEY,
    Capability,
    EnvironmentVariable,
    LogLevel,
)


class DatabaseConfig(BaseModel):
    """Database connection configuration consumed by the database manager."""

    connection_string: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.DATABASE_URL.value, "sqlite:///./clawpress.db"
        ),
        description="SQLAlchemy URL, e.g. postgresql+psycopg://user:pw@host/db",
    )
    pool_size: int = Field(default=5, gt=0, description="Connection pool size")
    max_overflow: int = Field(default=10, ge=0, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, gt=0, description="Pool timeout in seconds")
    echo: bool = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.DB_ECHO.value, "false").lower()
        == "true",
        description="Echo SQL statements",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(validate_default=True)

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class IntegrationConfig(BaseModel):
    """Settings binding the plugin to the OpenClaw integration."""

    model_config = ConfigDict(validate_default=True)

    app_password_name: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.APP_PASSWORD_NAME.value, APP_PASSWORD_NAME
        ),
        description="Reserved application password name",
    )
    app_id: str = Field(default=APP_ID, description="App id recorded on created credentials")
    meta_key: str = Field(default=META_KEY, description="Attribution tag meta key")
    flash_prefix: str = Field(default=FLASH_PREFIX, description="Flash state key prefix")
    error_ttl_seconds: int = Field(default=60, gt=0, description="Error flash lifetime")
    created_ttl_seconds: int = Field(default=300, gt=0, description="Created flash lifetime")
    recent_posts_limit: int = Field(default=5, gt=0, description="Rows in the recency list")
    site_url: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.SITE_URL.value, "http://localhost/"),
        description="Public site URL handed to the integration",
    )
    admin_page_url: str = Field(
        default="/wp-admin/options-general.php?page=clawpress",
        description="Settings page the form flow redirects back to",
    )

    @field_validator("app_password_name")
    def validate_app_password_name(cls, v: str) -> str:
        """Reserved name must not be blank."""
        if not v or not v.strip():
            raise ValueError("app_password_name must be a non-empty string")
        return v.strip()


class SecurityConfig(BaseModel):
    """Security-related configuration."""

    nonce_secret: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.NONCE_SECRET.value, "clawpress-development-secret"
        ),
        description="HMAC secret for CSRF nonces",
    )
    nonce_lifetime_seconds: int = Field(default=86400, gt=0, description="Nonce lifetime")
    password_length: int = Field(default=24, ge=16, description="Generated password length")
    required_capability: str = Field(
        default=Capability.MANAGE_OPTIONS.value,
        description="Capability needed to manage the connection",
    )
    roster_capability: str = Field(
        default=Capability.LIST_USERS.value,
        description="Capability needed to view the roster",
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    integration: IntegrationConfig = Field(
        default_factory=IntegrationConfig, description="Integration configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None

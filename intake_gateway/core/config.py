"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_supabase_settings() -> "SupabaseSettings":
    """Build Supabase settings from environment.

    BaseSettings populates fields from the environment, but static type
    checkers treat them as constructor arguments.
    """

    return SupabaseSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class SupabaseSettings(BaseSettings):
    """Connection settings for the Supabase project holding tenant data.

    Both values are optional at load time so the process can still start and
    report ``server_misconfigured`` instead of crashing on import.
    """

    url: str | None = Field(
        None,
        description="Supabase project URL (e.g., https://xyz.supabase.co)",
    )
    service_role_key: str | None = Field(
        None,
        description="Service role key; bypasses RLS on the intake tables",
    )

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        case_sensitive=False,
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.service_role_key)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    stealth_mode: bool = Field(
        True,
        description="Answer every rejected submission with the uniform success response",
    )
    backend: Literal["supabase", "memory"] = Field(
        "supabase",
        description="Storage backend for tenants, counters and audit records",
    )
    memory_tenants_file: str | None = Field(
        None,
        description="JSON file with tenant definitions for the memory backend",
    )
    default_rate_limit_per_hour: int = Field(
        10,
        description="Hourly quota used when a tenant does not define one",
        ge=1,
    )
    honeypot_field: str = Field(
        "company_website",
        description="Name of the hidden form field that must be sent empty",
    )
    tenant_cache_ttl_seconds: int = Field(
        0,
        description="Seconds a resolved tenant stays cached (0 disables caching)",
        ge=0,
    )
    notifications_enabled: bool = Field(
        True,
        description="Deliver webhook notifications for admitted submissions",
    )
    notify_timeout_seconds: float = Field(
        5.0,
        description="Timeout for a single webhook delivery attempt",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field("json", description="Log line format")
    output: Literal["stdout", "file"] = Field("stdout", description="Log destination")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a setting has an invalid value.
    """

    app_env: str = APP_ENV
    supabase: SupabaseSettings = Field(default_factory=_build_supabase_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()

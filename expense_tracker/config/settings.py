"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location and the dashboard thresholds live in one place and are
validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(memory|json)$",
        description="Key-value backend: 'memory' (lost on restart) or 'json' (files on disk)"
    )
    data_dir: Path = Field(
        default=Path(".expense_tracker"),
        description="Directory holding one JSON file per storage key"
    )
    key_prefix: str = Field(
        default="dabbulu",
        min_length=1,
        description="Prefix for the user/expenses/budgets storage keys"
    )

    @field_validator('key_prefix')
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        """Keys become file names, so keep them path-safe."""
        if not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError(
                f"key_prefix must only contain letters, digits, '_' or '-': {v!r}"
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for the structured log"
    )

    # Dashboard behaviour
    recent_expense_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many recent expenses the dashboard shows"
    )
    near_limit_percent: float = Field(
        default=80.0,
        ge=0.0,
        le=100.0,
        description="Budget usage above this percentage is flagged as near the limit"
    )
    notification_seconds: float = Field(
        default=3.0,
        gt=0.0,
        le=60.0,
        description="How long a confirmation notification stays visible"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, Union[bool, str]]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results: dict[str, Union[bool, str]] = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

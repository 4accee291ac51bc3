"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from expense_tracker.config import (
    AppSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Isolate each test from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "STORAGE_BACKEND",
        "STORAGE_DATA_DIR",
        "STORAGE_KEY_PREFIX",
        "LOG_LEVEL",
        "NEAR_LIMIT_PERCENT",
        "RECENT_EXPENSE_LIMIT",
        "NOTIFICATION_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self):
        """Test default storage configuration."""
        settings = StorageSettings()
        assert settings.backend == "json"
        assert settings.data_dir == Path(".expense_tracker")
        assert settings.key_prefix == "dabbulu"

    def test_from_environment(self, monkeypatch):
        """Test that STORAGE_* variables are read."""
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("STORAGE_KEY_PREFIX", "mine")

        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.key_prefix == "mine"

    def test_unknown_backend_rejected(self):
        """Test that only memory and json are accepted."""
        with pytest.raises(ValidationError):
            StorageSettings(backend="sqlite")

    def test_key_prefix_must_be_path_safe(self):
        """Test that key prefixes cannot contain path separators."""
        with pytest.raises(ValidationError):
            StorageSettings(key_prefix="../x")


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self):
        """Test default dashboard behaviour."""
        settings = AppSettings()
        assert settings.recent_expense_limit == 5
        assert settings.near_limit_percent == 80.0
        assert settings.notification_seconds == 3.0
        assert settings.log_level == "INFO"

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            AppSettings(log_level="LOUD")


class TestValidateAllSettings:
    """Tests for validate_all_settings."""

    def test_all_valid(self):
        """Test a clean environment."""
        status = validate_all_settings()
        assert status == {"storage": True, "app": True}

    def test_reports_errors(self, monkeypatch):
        """Test that a broken section is reported, not raised."""
        monkeypatch.setenv("STORAGE_BACKEND", "sqlite")

        status = validate_all_settings()

        assert status["storage"] is False
        assert isinstance(status["storage_error"], str)
        assert "backend" in status["storage_error"]
        assert status["app"] is True

    def test_get_settings_is_cached(self):
        """Test that get_settings returns the same object."""
        assert get_settings() is get_settings()

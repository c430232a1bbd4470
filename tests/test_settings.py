"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from allowance_ledger.config import (
    AppSettings,
    DisplaySettings,
    MalformedLinePolicy,
    Settings,
    StorageBackend,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


class TestDefaults:
    """Default values when nothing is configured."""

    def test_storage_defaults(self):
        settings = StorageSettings()
        assert settings.backend == StorageBackend.FILE
        assert settings.escape_memo is True
        assert settings.malformed_line_policy == MalformedLinePolicy.SKIP
        assert settings.ledger_path == Path.home() / "Documents" / "allowance_list.txt"

    def test_display_defaults(self):
        settings = DisplaySettings()
        assert settings.currency_symbol == "¥"
        assert settings.date_format == "%Y/%m/%d"

    def test_root_aggregates_sub_settings(self):
        settings = Settings()
        assert isinstance(settings.storage, StorageSettings)
        assert isinstance(settings.display, DisplaySettings)
        assert isinstance(settings.app, AppSettings)


class TestEnvironment:
    """Values read from ALLOWANCE_* environment variables."""

    def test_storage_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ALLOWANCE_STORAGE_BACKEND", "preferences")
        monkeypatch.setenv("ALLOWANCE_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("ALLOWANCE_STORAGE_MALFORMED_LINE_POLICY", "abort")
        settings = StorageSettings()
        assert settings.backend == StorageBackend.PREFERENCES
        assert settings.preferences_path == tmp_path / "allowance_prefs.json"
        assert settings.malformed_line_policy == MalformedLinePolicy.ABORT

    def test_display_from_env(self, monkeypatch):
        monkeypatch.setenv("ALLOWANCE_DISPLAY_CURRENCY_SYMBOL", "€")
        assert Settings().display.currency_symbol == "€"

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestValidation:
    """Rejected configuration values."""

    def test_file_name_must_be_bare(self):
        with pytest.raises(ValidationError):
            StorageSettings(file_name="../elsewhere.txt")

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            StorageSettings(backend="cloud")

    def test_log_level_normalized(self):
        assert AppSettings(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("ALLOWANCE_LOG_LEVEL", "chatty")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["display"] is True
        assert results["app"] is False
        assert "app_error" in results

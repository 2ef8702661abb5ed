"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from expense_tracker.config import TrackerSettings, get_settings
from expense_tracker.models.entry import LedgerProfile, TrackerMode


class TestTrackerSettings:
    """Tests for TrackerSettings."""

    def test_defaults(self, monkeypatch):
        """Test default values without environment overrides."""
        monkeypatch.delenv("EXPENSE_TRACKER_MODE", raising=False)
        settings = TrackerSettings(_env_file=None)
        assert settings.mode == TrackerMode.INCOME_LEDGER
        assert settings.currency_symbol == "₹"
        assert settings.storage_keys == ["incomes", "expenses"]
        assert settings.profile == LedgerProfile.income_ledger()

    def test_environment_overrides(self, monkeypatch):
        """Test values are read from EXPENSE_TRACKER_ variables."""
        monkeypatch.setenv("EXPENSE_TRACKER_MODE", "fixed_income")
        monkeypatch.setenv("EXPENSE_TRACKER_CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("EXPENSE_TRACKER_USE_FILE_STORAGE", "false")

        settings = TrackerSettings(_env_file=None)

        assert settings.mode == TrackerMode.FIXED_INCOME
        assert settings.currency_symbol == "$"
        assert settings.use_file_storage is False
        assert settings.storage_keys == ["income", "expenses"]

    def test_env_file(self, tmp_path):
        """Test values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("EXPENSE_TRACKER_STORAGE_PATH=/data/ledger.json\n", encoding="utf-8")

        settings = TrackerSettings(_env_file=str(env_file))

        assert settings.storage_path == "/data/ledger.json"

    def test_log_level_normalized(self):
        """Test log level is upper-cased."""
        assert TrackerSettings(_env_file=None, log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        """Test an unknown log level fails validation."""
        with pytest.raises(ValidationError):
            TrackerSettings(_env_file=None, log_level="chatty")

    def test_unknown_mode_rejected(self):
        """Test an unknown mode fails validation."""
        with pytest.raises(ValidationError):
            TrackerSettings(_env_file=None, mode="household")

    def test_get_settings_is_cached(self):
        """Test get_settings returns the same instance until cleared."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.
All variables use the EXPENSE_TRACKER_ prefix, e.g.:

    EXPENSE_TRACKER_MODE=fixed_income
    EXPENSE_TRACKER_STORAGE_PATH=/home/me/.ledger.json
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_tracker.models.entry import LedgerProfile, TrackerMode


class TrackerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    mode: TrackerMode = Field(
        default=TrackerMode.INCOME_LEDGER,
        description="Which tracker mode to run"
    )

    # Storage
    use_file_storage: bool = Field(
        default=True,
        description="Persist to a JSON file (False keeps everything in memory)"
    )
    storage_path: str = Field(
        default="expense_tracker_data.json",
        description="Path of the JSON document holding all stored ledgers"
    )
    incomes_key: str = Field(default="incomes", min_length=1)
    expenses_key: str = Field(default="expenses", min_length=1)
    income_key: str = Field(
        default="income",
        min_length=1,
        description="Key of the single income value (fixed_income mode)"
    )

    # Display
    currency_symbol: str = Field(
        default="₹",
        description="Symbol prefixed to every displayed amount"
    )
    date_format: str = Field(
        default="%d/%m/%Y, %I:%M:%S %p",
        description="strftime format of the timestamp stored on each entry"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level for the structured logger"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def profile(self) -> LedgerProfile:
        """Get the ledger rules for the configured mode."""
        return LedgerProfile.for_mode(self.mode)

    @property
    def storage_keys(self) -> list[str]:
        """All keys the tracker writes in the configured mode."""
        if self.profile.uses_income_ledger:
            return [self.incomes_key, self.expenses_key]
        return [self.income_key, self.expenses_key]


@lru_cache()
def get_settings() -> TrackerSettings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return TrackerSettings()

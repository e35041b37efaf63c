"""
Configuration Management for Pocket Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Components receive their settings explicitly; get_settings() is only
the default used when a caller does not pass one in.
"""

import tempfile
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """On-disk layout of the profile index and per-profile folders."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".pocket_ledger",
        description="Document root holding the profile index and profile folders"
    )
    profiles_index_filename: str = Field(
        default="profiles.json",
        description="Registry index file name inside the data root"
    )

    # Per-profile file names
    transactions_filename: str = Field(default="transactions.csv")
    balances_filename: str = Field(default="balance_breakdown.csv")
    savings_filename: str = Field(default="savings.csv")
    quick_notes_filename: str = Field(default="quickNotes.json")

    @property
    def profiles_index_path(self) -> Path:
        return self.data_dir / self.profiles_index_filename


class LedgerSettings(BaseSettings):
    """Business rules for what a valid transaction is."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    default_daily_limit: Decimal = Field(
        default=Decimal("70.00"),
        ge=0,
        description="Daily savings limit used until the profile sets its own"
    )
    note_required_above: Decimal = Field(
        default=Decimal("20"),
        ge=0,
        description="Transactions above this amount must carry a note"
    )
    large_amount_warning: Decimal = Field(
        default=Decimal("100000"),
        gt=0,
        description="Amounts above this are accepted with a warning"
    )


class ExportSettings(BaseSettings):
    """Where and how the shareable CSV export is written."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_EXPORT_",
        extra="ignore"
    )

    export_dir: Path = Field(
        default=Path(tempfile.gettempdir()),
        description="Directory the export file is written into"
    )
    export_filename: str = Field(
        default="TransactionsExport.csv",
        description="Name of the exported file"
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M",
        description="strftime format for the Date column"
    )

    @field_validator("date_format")
    @classmethod
    def validate_date_format(cls, v: str) -> str:
        """The export is comma separated, so the date must not add columns."""
        if "," in v:
            raise ValueError("Export date format must not contain commas")
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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    audit_history_size: int = Field(
        default=200,
        ge=1,
        le=10000,
        description="Number of recent audit events kept in memory"
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
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

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


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries describing any failure. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "ledger", "export", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

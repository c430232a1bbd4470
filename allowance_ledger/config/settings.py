"""
Configuration Management for Allowance Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, display formatting and load policy are the only knobs
the ledger core has, and all of them are validated at startup.
"""

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(str, Enum):
    """Where the serialized ledger blob is kept."""
    FILE = "file"                # Plain text file, one record per line
    PREFERENCES = "preferences"  # Key-value preference store (JSON file)
    MEMORY = "memory"            # Process memory only (tests, previews)


class MalformedLinePolicy(str, Enum):
    """What to do with a persisted line that cannot be decoded."""
    SKIP = "skip"    # Drop the line, log a warning, keep loading
    ABORT = "abort"  # Refuse to construct the ledger


class StorageSettings(BaseSettings):
    """Persistence backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ALLOWANCE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: StorageBackend = Field(
        default=StorageBackend.FILE,
        description="Storage backend to use"
    )
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / "Documents",
        description="Directory holding the ledger files"
    )
    file_name: str = Field(
        default="allowance_list.txt",
        min_length=1,
        description="Ledger text file name (file backend)"
    )
    preferences_file: str = Field(
        default="allowance_prefs.json",
        min_length=1,
        description="Preference store file name (preferences backend)"
    )
    preferences_key: str = Field(
        default="items",
        min_length=1,
        description="Key under which the ledger blob is stored"
    )
    escape_memo: bool = Field(
        default=True,
        description=(
            "Mark and escape memos holding line breaks or a leading backslash; "
            "turn off for files whose memos start with a backslash"
        )
    )
    malformed_line_policy: MalformedLinePolicy = Field(
        default=MalformedLinePolicy.SKIP,
        description="Handling of persisted lines that fail to decode"
    )

    @field_validator('file_name', 'preferences_file')
    @classmethod
    def validate_plain_file_name(cls, v: str) -> str:
        """File names must not smuggle in directory components."""
        if Path(v).name != v:
            raise ValueError(f"Expected a bare file name, got: {v}")
        return v

    @property
    def ledger_path(self) -> Path:
        """Full path of the ledger text file."""
        return Path(self.data_dir).expanduser() / self.file_name

    @property
    def preferences_path(self) -> Path:
        """Full path of the preference store file."""
        return Path(self.data_dir).expanduser() / self.preferences_file


class DisplaySettings(BaseSettings):
    """How totals, rows and default form values are rendered."""

    model_config = SettingsConfigDict(
        env_prefix="ALLOWANCE_DISPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_symbol: str = Field(
        default="¥",
        description="Glyph prefixed to every rendered amount"
    )
    total_label: str = Field(
        default="Total: ",
        description="Text shown before the running total"
    )
    date_format: str = Field(
        default="%Y/%m/%d",
        description="strftime format of the default entry date"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALLOWANCE_",
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
        description="Minimum level for local log output"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the logging module knows."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access. Sub-settings can be
    passed explicitly to override what the environment provides.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    app: AppSettings = Field(default_factory=AppSettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    for name, factory in (
        ("storage", StorageSettings),
        ("display", DisplaySettings),
        ("app", AppSettings),
    ):
        try:
            factory()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

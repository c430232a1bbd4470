"""Configuration package."""

from allowance_ledger.config.settings import (
    AppSettings,
    DisplaySettings,
    MalformedLinePolicy,
    Settings,
    StorageBackend,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DisplaySettings",
    "MalformedLinePolicy",
    "Settings",
    "StorageBackend",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]

"""Services package."""

from allowance_ledger.services.storage import (
    FileLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    PreferencesLedgerStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
    create_storage,
)

__all__ = [
    "FileLedgerStorage",
    "InMemoryLedgerStorage",
    "LedgerStorageInterface",
    "PreferencesLedgerStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "create_storage",
]

"""
Storage Services Package

Provides the abstract blob storage interface and its implementations:
a text file, a key-value preference store, and process memory.
"""

from allowance_ledger.config import StorageBackend, StorageSettings
from allowance_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from allowance_ledger.services.storage.file_storage import (
    FileLedgerStorage,
    atomic_write_text,
)
from allowance_ledger.services.storage.memory import InMemoryLedgerStorage
from allowance_ledger.services.storage.preferences import PreferencesLedgerStorage


def create_storage(settings: StorageSettings) -> LedgerStorageInterface:
    """Build the backend selected by `settings.backend`."""
    if settings.backend == StorageBackend.PREFERENCES:
        return PreferencesLedgerStorage(
            settings.preferences_path,
            key=settings.preferences_key,
        )
    if settings.backend == StorageBackend.MEMORY:
        return InMemoryLedgerStorage()
    return FileLedgerStorage(settings.ledger_path)


__all__ = [
    # Interface
    "LedgerStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "FileLedgerStorage",
    "InMemoryLedgerStorage",
    "PreferencesLedgerStorage",
    "atomic_write_text",
    "create_storage",
]

"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the ledger in a plain text file or in a key-value preference store
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from where the bytes end up

The interface is intentionally tiny: the ledger is persisted as ONE opaque
text blob. The core always saves the complete serialized ledger; it never
appends or patches.
"""

from abc import ABC, abstractmethod


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger blob storage.

    Any backend (text file, preference store, memory) must implement
    these methods.
    """

    #: Short backend name used in logs.
    name: str = "storage"

    @abstractmethod
    def load(self) -> str:
        """
        Read the full persisted blob.

        Returns:
            The blob, or an empty string if nothing has ever been saved

        Raises:
            StorageReadError: If the backend exists but cannot be read
        """
        pass

    @abstractmethod
    def save(self, blob: str) -> None:
        """
        Replace the entire persisted blob.

        A subsequent load() observes either the old blob or the new one,
        never a partial write.

        Args:
            blob: The complete serialized ledger

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Persisted ledger could not be read."""
    pass


class StorageWriteError(StorageError):
    """Ledger could not be written; the previous blob is still in place."""
    pass

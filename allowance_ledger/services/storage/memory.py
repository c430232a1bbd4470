"""In-memory ledger storage, for tests and previews."""

from allowance_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageWriteError,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """
    Keeps the blob in process memory.

    Set `fail_next_save` to make the next save raise StorageWriteError
    without touching the stored blob.
    """

    name = "memory"

    def __init__(self, blob: str = ""):
        self._blob = blob
        self.fail_next_save = False
        self.load_count = 0
        self.save_count = 0

    def load(self) -> str:
        self.load_count += 1
        return self._blob

    def save(self, blob: str) -> None:
        if self.fail_next_save:
            self.fail_next_save = False
            raise StorageWriteError("Simulated write failure")
        self._blob = blob
        self.save_count += 1

    @property
    def blob(self) -> str:
        """Current stored blob, without counting as a load."""
        return self._blob

"""
Key-Value Preference Store Implementation

DESIGN DECISION: Some front ends keep small app state in a preference
store rather than in a user-visible file. We model that store as a JSON
object on disk and keep the ledger blob under a single key.

Other keys in the same store belong to somebody else: a save rewrites
only the ledger key and carries every other entry over unchanged.
"""

import json
from pathlib import Path
from typing import Any, Union

from allowance_ledger.services.storage.file_storage import atomic_write_text
from allowance_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class PreferencesLedgerStorage(LedgerStorageInterface):
    """Stores the ledger blob under one key of a JSON preference file."""

    name = "preferences"

    def __init__(self, path: Union[str, Path], key: str = "items"):
        self._path = Path(path).expanduser()
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def _read_store(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageReadError(f"Failed to read preference store {self._path}: {e}")
        if not isinstance(payload, dict):
            raise StorageReadError(
                f"Preference store {self._path} does not hold a JSON object"
            )
        return payload

    def load(self) -> str:
        value = self._read_store().get(self._key, "")
        if not isinstance(value, str):
            raise StorageReadError(
                f"Preference '{self._key}' holds {type(value).__name__}, expected text"
            )
        return value

    def save(self, blob: str) -> None:
        try:
            store = self._read_store()
        except StorageReadError as e:
            raise StorageWriteError(f"Refusing to overwrite unreadable store: {e}")

        store[self._key] = blob
        try:
            atomic_write_text(
                self._path,
                json.dumps(store, ensure_ascii=False, indent=2),
            )
        except OSError as e:
            raise StorageWriteError(f"Failed to write preference store {self._path}: {e}")

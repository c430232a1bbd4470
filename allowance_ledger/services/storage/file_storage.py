"""
Text File Storage Implementation

DESIGN DECISION: The ledger lives in one UTF-8 text file, one record per
line, so the user can open it in any editor.

Writes go to a temporary file in the same directory which is then
os.replace()d over the target. A reader therefore sees either the old
ledger or the new one, never a half-written file.
"""

import os
import tempfile
from pathlib import Path
from typing import Union

from allowance_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageReadError,
    StorageWriteError,
)


def atomic_write_text(path: Path, text: str) -> None:
    """Replace `path` with `text` atomically. Raises OSError on failure."""
    directory = path.parent
    directory.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


class FileLedgerStorage(LedgerStorageInterface):
    """Stores the ledger blob as the full content of a text file."""

    name = "file"

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str:
        """Read the file; a missing file is an empty ledger."""
        if not self._path.exists():
            return ""
        try:
            with self._path.open("r", encoding="utf-8", newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read ledger file {self._path}: {e}")

    def save(self, blob: str) -> None:
        try:
            atomic_write_text(self._path, blob)
        except OSError as e:
            raise StorageWriteError(f"Failed to write ledger file {self._path}: {e}")

"""Validation package."""

from allowance_ledger.validation.validator import (
    DATE_CHARS,
    MAX_DATE_LENGTH,
    RecordValidator,
)

__all__ = ["DATE_CHARS", "MAX_DATE_LENGTH", "RecordValidator"]

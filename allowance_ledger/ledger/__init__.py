"""Ledger core: line codec, record store and running total."""

from allowance_ledger.ledger.codec import (
    DELIMITER,
    MalformedRecordError,
    RecordCodec,
    split_lines,
)
from allowance_ledger.ledger.store import IndexOutOfRangeError, LedgerStore
from allowance_ledger.ledger.totals import TotalAggregator

__all__ = [
    "DELIMITER",
    "IndexOutOfRangeError",
    "LedgerStore",
    "MalformedRecordError",
    "RecordCodec",
    "TotalAggregator",
    "split_lines",
]

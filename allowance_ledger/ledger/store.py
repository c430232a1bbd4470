"""
Ledger Store

The in-memory ordered record list and the only code that mutates it.

DESIGN DECISION: Every mutation is one transaction:
1. Build the next record list (the current one is left untouched)
2. Serialize the COMPLETE list and save it
3. Only if the save succeeded, swap the new list in and recompute the total

A failed save therefore leaves memory exactly as it was, matching what
is still on disk. The blob is loaded once, when the store is built.
"""

from typing import Callable, Optional

from allowance_ledger.audit import AuditLogger
from allowance_ledger.config import MalformedLinePolicy
from allowance_ledger.ledger.codec import MalformedRecordError, RecordCodec, split_lines
from allowance_ledger.ledger.totals import TotalAggregator
from allowance_ledger.models.record import LedgerRecord, TotalSummary
from allowance_ledger.services.storage import LedgerStorageInterface, StorageError


class IndexOutOfRangeError(IndexError):
    """An index does not point at a current record (stale UI selection)."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Index {index} is out of range for a ledger of {size} records")
        self.index = index
        self.size = size


class LedgerStore:
    """
    Owns the ledger records for the lifetime of a session.

    Newest records live at index 0. Callers only ever get tuples of
    frozen records back, never the internal list.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        codec: Optional[RecordCodec] = None,
        aggregator: Optional[TotalAggregator] = None,
        malformed_line_policy: MalformedLinePolicy = MalformedLinePolicy.SKIP,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._codec = codec or RecordCodec()
        self._audit_logger = audit_logger
        self._aggregator = aggregator or TotalAggregator(audit_logger=audit_logger)
        self._policy = malformed_line_policy
        self.skipped_lines = 0

        self._records: list[LedgerRecord] = self._load()
        self._summary = self._aggregator.recompute(self._records, report_skipped=True)

        if self._audit_logger:
            self._audit_logger.log_ledger_loaded(
                record_count=len(self._records),
                skipped_lines=self.skipped_lines,
                backend=getattr(storage, "name", type(storage).__name__),
            )

    def _load(self) -> list[LedgerRecord]:
        """Decode the persisted blob, applying the malformed-line policy."""
        blob = self._storage.load()
        records = []
        for line_number, line in split_lines(blob):
            try:
                records.append(self._codec.decode(line, line_number))
            except MalformedRecordError as e:
                if self._policy == MalformedLinePolicy.ABORT:
                    raise
                self.skipped_lines += 1
                if self._audit_logger:
                    self._audit_logger.log_malformed_line(
                        line_number=line_number,
                        line=line,
                        reason=str(e),
                    )
        return records

    def _commit(self, records: list[LedgerRecord], operation: str) -> TotalSummary:
        blob = self._codec.encode_ledger(records)
        try:
            self._storage.save(blob)
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(operation=operation, error_message=str(e))
            raise

        self._records = records
        self._summary = self._aggregator.recompute(records)
        return self._summary

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._records):
            if self._audit_logger:
                self._audit_logger.log_index_out_of_range(index, len(self._records))
            raise IndexOutOfRangeError(index, len(self._records))

    def insert_front(self, record: LedgerRecord) -> TotalSummary:
        """Prepend a record; every existing index shifts by one."""
        summary = self._commit([record, *self._records], "insert")
        if self._audit_logger:
            self._audit_logger.log_record_added(amount=record.amount, total=summary.total)
        return summary

    def update_at(self, index: int, record: LedgerRecord) -> TotalSummary:
        """
        Replace the record at `index` in place.

        Raises:
            IndexOutOfRangeError: If index is not a current position
        """
        self._check_index(index)
        records = list(self._records)
        records[index] = record
        summary = self._commit(records, "update")
        if self._audit_logger:
            self._audit_logger.log_record_updated(
                record_index=index,
                amount=record.amount,
                total=summary.total,
            )
        return summary

    def remove_marked(self, predicate: Callable[[int, LedgerRecord], bool]) -> list[int]:
        """
        Remove every record for which predicate(index, record) is true.

        Remaining records keep their relative order. Returns the removed
        indices, as they were before removal.
        """
        kept = []
        removed = []
        for index, record in enumerate(self._records):
            if predicate(index, record):
                removed.append(index)
            else:
                kept.append(record)

        summary = self._commit(kept, "delete")
        if self._audit_logger:
            self._audit_logger.log_records_deleted(indices=removed, total=summary.total)
        return removed

    def get(self, index: int) -> LedgerRecord:
        self._check_index(index)
        return self._records[index]

    def all(self) -> tuple[LedgerRecord, ...]:
        """Read-only snapshot of the records, newest first."""
        return tuple(self._records)

    @property
    def summary(self) -> TotalSummary:
        return self._summary

    @property
    def aggregator(self) -> TotalAggregator:
        return self._aggregator

    def __len__(self) -> int:
        return len(self._records)

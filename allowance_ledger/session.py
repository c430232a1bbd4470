"""
Ledger Session

This module ties the components together and is the ONLY surface the UI
talks to:
1. submit_new / submit_update  (validate -> mutate -> persist -> total)
2. request_delete_marked       (remove every marked record)
3. select / toggle_mark        (transient selection state)
4. get_snapshot / get_total_display (read-only views)

DESIGN DECISION: The session enforces the boundaries:
- Nothing reaches the ledger without passing the validator
- A rejected submission changes nothing, not even the selection
- The UI only ever receives frozen snapshots, never the live records

Selection policy: selecting a record for editing never touches the
deletion marks of OTHER records. A record is never selected and marked
at once: selecting a marked record unmarks it, and marking the selected
record clears the selection.
"""

from datetime import date
from typing import Optional

from allowance_ledger.audit import AuditLogger
from allowance_ledger.config import Settings, get_settings
from allowance_ledger.ledger import LedgerStore, RecordCodec, TotalAggregator
from allowance_ledger.models.record import (
    NO_SELECTION,
    LedgerSnapshot,
    RecordDraft,
    RowDisplay,
    SelectionState,
    TotalSummary,
    ValidationResult,
)
from allowance_ledger.services.storage import LedgerStorageInterface, create_storage
from allowance_ledger.validation import RecordValidator


class LedgerSession:
    """
    One user's ledger plus the UI selection over it.

    Single-threaded: each call runs to completion before the next one.
    """

    def __init__(
        self,
        store: LedgerStore,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        date_format: str = "%Y/%m/%d",
    ):
        self._store = store
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger
        self._date_format = date_format
        self._selection = SelectionState()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _validate(
        self,
        date_text: str,
        amount: str,
        memo: str,
        record_index: Optional[int] = None,
    ) -> ValidationResult:
        result = self._validator.validate(date_text, amount, memo)
        if not result.is_valid and self._audit_logger:
            self._audit_logger.log_validation_failed(
                field=result.issue.field,
                code=result.issue.code.value,
                message=result.issue.message,
                record_index=record_index,
            )
        return result

    def submit_new(self, date_text: str, amount: str, memo: str) -> ValidationResult:
        """
        Validate and insert a record at the top of the ledger.

        Returns:
            The validation result; the ledger only changed if it is valid

        Raises:
            StorageError: If persisting failed (nothing changed)
        """
        result = self._validate(date_text, amount, memo)
        if not result.is_valid:
            return result

        self._store.insert_front(result.record)

        # Keep selection and marks on the same records after the shift
        selected = self._selection.selected_index
        self._selection = SelectionState(
            selected_index=selected + 1 if selected != NO_SELECTION else NO_SELECTION,
            marked=frozenset(index + 1 for index in self._selection.marked),
        )
        return result

    def submit_update(
        self,
        index: int,
        date_text: str,
        amount: str,
        memo: str,
    ) -> ValidationResult:
        """
        Validate and replace the record at `index`.

        Raises:
            IndexOutOfRangeError: If index does not point at a record
            StorageError: If persisting failed (nothing changed)
        """
        self._store.get(index)

        result = self._validate(date_text, amount, memo, record_index=index)
        if not result.is_valid:
            return result

        self._store.update_at(index, result.record)
        return result

    def save_selected(self, date_text: str, amount: str, memo: str) -> ValidationResult:
        """submit_update() against the currently selected record."""
        return self.submit_update(self._selection.selected_index, date_text, amount, memo)

    def request_delete_marked(self) -> int:
        """
        Remove every marked record and clear all marks.

        Returns:
            Number of records removed
        """
        marked = self._selection.marked
        removed = self._store.remove_marked(lambda index, _record: index in marked)

        selected = self._selection.selected_index
        if selected != NO_SELECTION:
            selected -= sum(1 for index in removed if index < selected)
        self._selection = SelectionState(selected_index=selected)
        return len(removed)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, index: int) -> RecordDraft:
        """
        Select a record for editing.

        Returns the record's fields to pre-fill the form; thousands
        separators are stripped from the amount.

        Raises:
            IndexOutOfRangeError: If index does not point at a record
        """
        record = self._store.get(index)
        self._selection = SelectionState(
            selected_index=index,
            marked=self._selection.marked - {index},
        )
        return RecordDraft(
            date=record.date,
            amount=record.amount.replace(",", ""),
            memo=record.memo,
        )

    def clear_selection(self) -> None:
        self._selection = SelectionState(marked=self._selection.marked)

    def toggle_mark(self, index: int) -> bool:
        """
        Flip the deletion mark of one record.

        Returns:
            True if the record is now marked

        Raises:
            IndexOutOfRangeError: If index does not point at a record
        """
        self._store.get(index)
        marked = set(self._selection.marked)
        selected = self._selection.selected_index

        if index in marked:
            marked.discard(index)
        else:
            marked.add(index)
            if index == selected:
                selected = NO_SELECTION

        self._selection = SelectionState(selected_index=selected, marked=frozenset(marked))
        return index in marked

    def is_marked(self, index: int) -> bool:
        return index in self._selection.marked

    @property
    def selection(self) -> SelectionState:
        return self._selection

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    @property
    def can_delete(self) -> bool:
        return self._selection.has_marks

    @property
    def can_save(self) -> bool:
        return self._selection.has_selection

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            records=self._store.all(),
            selection=self._selection,
            summary=self._store.summary,
        )

    def get_total_display(self) -> TotalSummary:
        return self._store.summary

    def render_rows(self) -> list[RowDisplay]:
        aggregator = self._store.aggregator
        return [aggregator.render_row(record) for record in self._store.all()]

    def default_date(self, today: Optional[date] = None) -> str:
        """Initial value of the date field: today in the configured format."""
        return (today or date.today()).strftime(self._date_format)


def create_session(
    settings: Optional[Settings] = None,
    storage: Optional[LedgerStorageInterface] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> LedgerSession:
    """
    Factory function to build a ready-to-use session.

    Args:
        settings: Settings to use; defaults to get_settings()
        storage: Backend override; defaults to the configured backend
        audit_logger: Audit logger; a local-only one is created if omitted

    Returns:
        A LedgerSession whose ledger has been loaded from storage
    """
    settings = settings or get_settings()
    audit_logger = audit_logger or AuditLogger()

    store = LedgerStore(
        storage=storage or create_storage(settings.storage),
        codec=RecordCodec(escape_memo=settings.storage.escape_memo),
        aggregator=TotalAggregator(
            currency_symbol=settings.display.currency_symbol,
            total_label=settings.display.total_label,
            audit_logger=audit_logger,
        ),
        malformed_line_policy=settings.storage.malformed_line_policy,
        audit_logger=audit_logger,
    )
    return LedgerSession(
        store=store,
        audit_logger=audit_logger,
        date_format=settings.display.date_format,
    )

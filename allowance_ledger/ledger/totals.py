"""
Running Total

Sums the signed amount of every record and renders it for display:
thousands grouping, currency glyph prefix, and a sign state the UI
maps to a text color.

Records whose amount text is not a well-formed integer are left out of
the sum instead of failing the whole computation. Only decoded lines can
carry such amounts, because every submission passes the validator first.
"""

from typing import Optional, Sequence

from allowance_ledger.audit import AuditLogger
from allowance_ledger.models.record import (
    LedgerRecord,
    RowDisplay,
    SignState,
    TotalSummary,
)


class TotalAggregator:
    """Computes TotalSummary values and rendered rows."""

    def __init__(
        self,
        currency_symbol: str = "¥",
        total_label: str = "Total: ",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._symbol = currency_symbol
        self._label = total_label
        self._audit_logger = audit_logger

    def format_amount(self, value: int) -> str:
        """1234 -> '¥1,234', -5 -> '¥-5'."""
        return f"{self._symbol}{value:,}"

    def recompute(
        self,
        records: Sequence[LedgerRecord],
        report_skipped: bool = False,
    ) -> TotalSummary:
        """
        Sum every well-formed amount.

        Args:
            records: Ledger records in storage order
            report_skipped: Emit an audit warning per left-out record
        """
        total = 0
        skipped = 0
        for index, record in enumerate(records):
            value = record.amount_value
            if value is None:
                skipped += 1
                if report_skipped and self._audit_logger:
                    self._audit_logger.log_amount_skipped(index, record.amount)
                continue
            total += value

        display = self.format_amount(total)
        return TotalSummary(
            total=total,
            sign_state=SignState.NEGATIVE if total < 0 else SignState.NONNEGATIVE,
            display=display,
            label=f"{self._label}{display}",
            skipped_count=skipped,
        )

    def render_row(self, record: LedgerRecord) -> RowDisplay:
        """Render one list row: date and amount, then the memo below."""
        value = record.amount_value
        amount = self.format_amount(value) if value is not None else f"{self._symbol}{record.amount}"
        return RowDisplay(
            text=f" {record.date} {amount}\n {record.memo}",
            sign_state=SignState.NEGATIVE if record.is_negative else SignState.NONNEGATIVE,
        )

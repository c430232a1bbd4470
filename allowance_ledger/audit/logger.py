"""
Audit Logger

DESIGN DECISION: Every significant ledger action is logged.
This provides:
1. Traceability of every change to the ledger
2. Debugging capability when a save fails or a line is corrupt
3. Recent history the UI can show without touching storage

The audit logger:
- Is synchronous, like the rest of the ledger core
- Gracefully handles failures (a broken log sink never breaks a mutation)
- Keeps a bounded in-memory history, newest first
"""

import logging
from collections import deque
from typing import Optional

import structlog

from allowance_ledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for the UI and for tests)
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("allowance_ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always records the event in memory. Returns False if the local
        log sink failed.
        """
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log sink failures never propagate into the ledger flow
            logging.getLogger(__name__).warning("audit log sink failed: %s", e)
            return False

        return True

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def log_ledger_loaded(
        self,
        record_count: int,
        skipped_lines: int,
        backend: str,
    ) -> None:
        """Log ledger construction."""
        self.log(AuditEventBuilder.ledger_loaded(
            record_count=record_count,
            skipped_lines=skipped_lines,
            backend=backend,
        ))

    def log_malformed_line(
        self,
        line_number: Optional[int],
        line: str,
        reason: str,
    ) -> None:
        """Log a persisted line that could not be decoded."""
        self.log(AuditEventBuilder.malformed_line_skipped(
            line_number=line_number,
            line=line,
            reason=reason,
        ))

    def log_validation_failed(
        self,
        field: str,
        code: str,
        message: str,
        record_index: Optional[int] = None,
    ) -> None:
        """Log a rejected submission."""
        self.log(AuditEventBuilder.validation_failed(
            field=field,
            code=code,
            message=message,
            record_index=record_index,
        ))

    def log_record_added(self, amount: str, total: int) -> None:
        self.log(AuditEventBuilder.record_added(amount=amount, total=total))

    def log_record_updated(self, record_index: int, amount: str, total: int) -> None:
        self.log(AuditEventBuilder.record_updated(
            record_index=record_index,
            amount=amount,
            total=total,
        ))

    def log_records_deleted(self, indices: list[int], total: int) -> None:
        self.log(AuditEventBuilder.records_deleted(indices=indices, total=total))

    def log_amount_skipped(self, record_index: int, amount: str) -> None:
        """Log a record left out of the total."""
        self.log(AuditEventBuilder.amount_skipped(
            record_index=record_index,
            amount=amount,
        ))

    def log_save_failed(self, operation: str, error_message: str) -> None:
        """Log a persistence failure."""
        self.log(AuditEventBuilder.save_failed(
            operation=operation,
            error_message=error_message,
        ))

    def log_index_out_of_range(self, record_index: int, size: int) -> None:
        self.log(AuditEventBuilder.index_out_of_range(
            record_index=record_index,
            size=size,
        ))

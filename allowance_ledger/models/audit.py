"""
Audit Models for Allowance Ledger

Every ledger mutation, rejected submission and storage problem is logged
for audit purposes. This provides:
1. Traceability of what changed the ledger and when
2. Debugging information when a save fails or a line is corrupt
3. Visibility into records silently left out of the total

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of a ledger operation has its own event type.
    """
    # Startup
    LEDGER_LOADED = "ledger_loaded"
    MALFORMED_LINE_SKIPPED = "malformed_line_skipped"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Mutations
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORDS_DELETED = "records_deleted"

    # Totals
    AMOUNT_SKIPPED = "amount_skipped"

    # Failures
    SAVE_FAILED = "save_failed"
    INDEX_OUT_OF_RANGE = "index_out_of_range"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which record is this about?
    record_index: Optional[int] = Field(
        default=None,
        description="Ledger index the event relates to, if any"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "record_index": self.record_index,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added(amount="-50", total=950)
        event = AuditEventBuilder.save_failed(operation="insert", error_message=str(e))
    """

    @staticmethod
    def ledger_loaded(
        record_count: int,
        skipped_lines: int,
        backend: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            description=f"Ledger loaded with {record_count} records",
            details={
                "record_count": record_count,
                "skipped_lines": skipped_lines,
                "backend": backend,
            },
        )

    @staticmethod
    def malformed_line_skipped(
        line_number: Optional[int],
        line: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MALFORMED_LINE_SKIPPED,
            severity=AuditSeverity.WARNING,
            description=f"Skipped unreadable ledger line {line_number}",
            details={
                "line_number": line_number,
                "line": line,
            },
            error_message=reason,
        )

    @staticmethod
    def validation_failed(
        field: str,
        code: str,
        message: str,
        record_index: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            record_index=record_index,
            description=f"Submission rejected: {message}",
            details={
                "field": field,
                "code": code,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_added(
        amount: str,
        total: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            record_index=0,
            description=f"Record added: {amount}",
            details={
                "amount": amount,
                "total": total,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_updated(
        record_index: int,
        amount: str,
        total: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            record_index=record_index,
            description=f"Record {record_index} updated: {amount}",
            details={
                "amount": amount,
                "total": total,
            },
            is_user_action=True,
        )

    @staticmethod
    def records_deleted(
        indices: list[int],
        total: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_DELETED,
            description=f"Deleted {len(indices)} records",
            details={
                "indices": indices,
                "total": total,
            },
            is_user_action=True,
        )

    @staticmethod
    def amount_skipped(
        record_index: int,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AMOUNT_SKIPPED,
            severity=AuditSeverity.WARNING,
            record_index=record_index,
            description=f"Amount '{amount}' is not a number; left out of total",
            details={
                "amount": amount,
            },
        )

    @staticmethod
    def save_failed(
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Saving ledger failed during {operation}; changes rolled back",
            details={
                "operation": operation,
            },
            error_message=error_message,
        )

    @staticmethod
    def index_out_of_range(
        record_index: int,
        size: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INDEX_OUT_OF_RANGE,
            severity=AuditSeverity.ERROR,
            record_index=record_index,
            description=f"Index {record_index} is outside a ledger of {size} records",
            details={
                "size": size,
            },
        )

"""
Data Models Package

This package contains all Pydantic models used in the Allowance Ledger.
All data flowing between the core and its collaborators conforms to these schemas.
"""

from allowance_ledger.models.record import (
    MAX_AMOUNT_DIGITS,
    NO_SELECTION,
    IssueCode,
    LedgerRecord,
    LedgerSnapshot,
    RecordDraft,
    RecordValidationError,
    RowDisplay,
    SelectionState,
    SignState,
    TotalSummary,
    ValidationIssue,
    ValidationResult,
    parse_amount,
)
from allowance_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "MAX_AMOUNT_DIGITS",
    "NO_SELECTION",
    "IssueCode",
    "LedgerRecord",
    "LedgerSnapshot",
    "RecordDraft",
    "RecordValidationError",
    "RowDisplay",
    "SelectionState",
    "SignState",
    "TotalSummary",
    "ValidationIssue",
    "ValidationResult",
    "parse_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

"""
Core Data Models for Allowance Ledger

These models define the schemas for everything the ledger core hands to
its collaborators. They are designed to:
1. Keep stored records immutable once created
2. Report validation outcomes as values, not control flow
3. Give the UI read-only snapshots it can render directly

DESIGN DECISION: A record keeps its amount as decimal TEXT.
Persisted lines are decoded without re-validation, so a corrupt amount
must still be representable; the parsed integer is derived on demand.
"""

from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


NO_SELECTION = -1

# Longest digit run accepted as an amount (leading zeros included).
# Keeps every amount, and any realistic total, far below the interpreter's
# int <-> str conversion limit.
MAX_AMOUNT_DIGITS = 18


def parse_amount(text: str) -> Optional[int]:
    """
    Parse amount text as a signed integer.

    Accepts 1 to MAX_AMOUNT_DIGITS ASCII digits with at most one leading
    '-'. Anything else, including a lone '-', yields None.
    """
    digits = text[1:] if text.startswith("-") else text
    if not digits or len(digits) > MAX_AMOUNT_DIGITS:
        return None
    if not all("0" <= ch <= "9" for ch in digits):
        return None
    return int(text)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class IssueCode(str, Enum):
    """
    Validation failure kinds.

    The validator checks rules in this order and stops at the first one
    that fails.
    """
    EMPTY_DATE = "empty_date"
    DATE_TOO_LONG = "date_too_long"
    DATE_INVALID_CHARS = "date_invalid_chars"
    EMPTY_AMOUNT = "empty_amount"
    AMOUNT_BAD_SIGN = "amount_bad_sign"
    AMOUNT_NOT_NUMERIC = "amount_not_numeric"


class SignState(str, Enum):
    """Sign of a rendered amount, used only to pick a display color."""
    NEGATIVE = "negative"
    NONNEGATIVE = "nonnegative"


# =============================================================================
# CORE RECORD MODEL
# =============================================================================

class LedgerRecord(BaseModel):
    """
    One ledger entry.

    Records are frozen: an edit replaces the record at its index, it never
    mutates the instance a snapshot may still be holding.
    """
    model_config = ConfigDict(frozen=True)

    date: str = Field(
        ...,
        description="User-entered date, digits and '/' only"
    )
    amount: str = Field(
        ...,
        description="Signed integer amount as decimal text"
    )
    memo: str = Field(
        default="",
        description="Free-text memo, may be empty"
    )

    @property
    def amount_value(self) -> Optional[int]:
        """The amount as an int, or None when the text is malformed."""
        return parse_amount(self.amount)

    @property
    def is_negative(self) -> bool:
        return self.amount.startswith("-")


class RecordDraft(BaseModel):
    """Raw form values, exactly as the user typed them."""

    date: str = ""
    amount: str = ""
    memo: str = ""


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        pattern="^(date|amount|memo)$",
        description="Field with the issue"
    )
    code: IssueCode = Field(
        ...,
        description="Which rule failed"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class RecordValidationError(ValueError):
    """Raised when a rejected validation result is unwrapped."""

    def __init__(self, issue: ValidationIssue):
        super().__init__(issue.message)
        self.issue = issue

    @property
    def code(self) -> IssueCode:
        return self.issue.code


class ValidationResult(BaseModel):
    """
    Outcome of validating one set of form values.

    Exactly one of `record` (accepted, normalized) and `issue` (rejected)
    is set.
    """

    record: Optional[LedgerRecord] = None
    issue: Optional[ValidationIssue] = None

    @model_validator(mode='after')
    def validate_exclusive(self) -> 'ValidationResult':
        if (self.record is None) == (self.issue is None):
            raise ValueError("Exactly one of record and issue must be set")
        return self

    @property
    def is_valid(self) -> bool:
        return self.record is not None

    def unwrap(self) -> LedgerRecord:
        """Return the accepted record or raise RecordValidationError."""
        if self.issue is not None:
            raise RecordValidationError(self.issue)
        return self.record


# =============================================================================
# PRESENTATION MODELS
# =============================================================================

class TotalSummary(BaseModel):
    """Running total over the ledger and its rendered forms."""
    model_config = ConfigDict(frozen=True)

    total: int = 0
    sign_state: SignState = SignState.NONNEGATIVE
    display: str = Field(
        ...,
        description="Grouped total with currency glyph, e.g. ¥1,234"
    )
    label: str = Field(
        ...,
        description="Header text, total label followed by display"
    )
    skipped_count: int = Field(
        default=0,
        ge=0,
        description="Records left out because their amount is malformed"
    )


class RowDisplay(BaseModel):
    """One rendered list row."""
    model_config = ConfigDict(frozen=True)

    text: str
    sign_state: SignState


class SelectionState(BaseModel):
    """
    Transient UI selection.

    At most one record is selected for editing; any number may be marked
    for deletion. The selected index is never marked at the same time.
    """
    model_config = ConfigDict(frozen=True)

    selected_index: int = Field(
        default=NO_SELECTION,
        ge=NO_SELECTION,
        description="Index selected for editing, -1 when none"
    )
    marked: frozenset[int] = Field(
        default_factory=frozenset,
        description="Indices marked for deletion"
    )

    @model_validator(mode='after')
    def validate_disjoint(self) -> 'SelectionState':
        if self.selected_index in self.marked:
            raise ValueError("Selected index cannot also be marked for deletion")
        if any(index < 0 for index in self.marked):
            raise ValueError("Marked indices must be non-negative")
        return self

    @property
    def has_selection(self) -> bool:
        return self.selected_index != NO_SELECTION

    @property
    def has_marks(self) -> bool:
        return bool(self.marked)


class LedgerSnapshot(BaseModel):
    """Read-only view handed to the UI for rendering."""
    model_config = ConfigDict(frozen=True)

    records: tuple[LedgerRecord, ...] = ()
    selection: SelectionState = Field(default_factory=SelectionState)
    summary: TotalSummary

    @property
    def can_delete(self) -> bool:
        return self.selection.has_marks

    @property
    def can_save(self) -> bool:
        return self.selection.has_selection

    def __len__(self) -> int:
        return len(self.records)

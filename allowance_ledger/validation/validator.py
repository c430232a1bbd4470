"""
Record Validation

DESIGN DECISION: Validation runs BEFORE anything touches the ledger.
The rules are checked in a fixed order and the first failing rule wins:

DATE:
1. Empty after trimming
2. Longer than 10 characters after trimming
3. Contains anything other than ASCII digits and '/'

AMOUNT:
4. Empty after trimming
5. A '-' anywhere but the first position, or more than one '-'
6. Anything other than ASCII digits after an optional leading '-',
   or more than MAX_AMOUNT_DIGITS digits

MEMO is free text and is never rejected.

IMPORTANT: Validation never mutates state. An accepted submission comes
back as a normalized record (date and amount trimmed, memo untouched);
a rejected one comes back as a single issue.
"""

from typing import Optional

from allowance_ledger.models.record import (
    MAX_AMOUNT_DIGITS,
    IssueCode,
    LedgerRecord,
    ValidationIssue,
    ValidationResult,
    parse_amount,
)

MAX_DATE_LENGTH = 10
DATE_CHARS = frozenset("0123456789/")


class RecordValidator:
    """Validates raw form values for a new or edited record."""

    def _check_date(self, date: str) -> Optional[ValidationIssue]:
        if not date:
            return ValidationIssue(
                field="date",
                code=IssueCode.EMPTY_DATE,
                message="Date is required",
            )
        if len(date) > MAX_DATE_LENGTH:
            return ValidationIssue(
                field="date",
                code=IssueCode.DATE_TOO_LONG,
                message=f"Date can be at most {MAX_DATE_LENGTH} characters",
            )
        if not set(date) <= DATE_CHARS:
            return ValidationIssue(
                field="date",
                code=IssueCode.DATE_INVALID_CHARS,
                message="Date may only contain digits and '/'",
            )
        return None

    def _check_amount(self, amount: str) -> Optional[ValidationIssue]:
        if not amount:
            return ValidationIssue(
                field="amount",
                code=IssueCode.EMPTY_AMOUNT,
                message="Amount is required",
            )

        # A minus sign is only allowed once, as the very first character
        minus = amount.find("-")
        if minus != -1 and (minus != 0 or amount.count("-") != 1):
            return ValidationIssue(
                field="amount",
                code=IssueCode.AMOUNT_BAD_SIGN,
                message="'-' is only allowed once, at the start of the amount",
            )

        if parse_amount(amount) is None:
            return ValidationIssue(
                field="amount",
                code=IssueCode.AMOUNT_NOT_NUMERIC,
                message=f"Amount must be a whole number of at most {MAX_AMOUNT_DIGITS} digits",
            )
        return None

    def validate(self, date: str, amount: str, memo: str) -> ValidationResult:
        """
        Run every rule in order and stop at the first failure.

        Args:
            date: Raw date text
            amount: Raw amount text
            memo: Raw memo text, passed through unchanged

        Returns:
            ValidationResult holding either the normalized record or the issue
        """
        date = date.strip()
        amount = amount.strip()

        issue = self._check_date(date) or self._check_amount(amount)
        if issue is not None:
            return ValidationResult(issue=issue)

        return ValidationResult(
            record=LedgerRecord(date=date, amount=amount, memo=memo),
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        One line the UI can show in an alert.

        This is what we show to the user when a submission is rejected.
        """
        if result.is_valid:
            return "Saved."
        return f"Error: {result.issue.message}"

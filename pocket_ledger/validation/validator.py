"""
Command Validation

DESIGN DECISION: Every command that carries an amount is validated
before the store touches its state. Validation happens in two steps:

STEP 1 - PARSING:
- The amount must be a finite decimal number
- Transaction amounts must be positive after rounding to cents

STEP 2 - BUSINESS RULES:
- Transactions above the note threshold need a note
- Notes containing commas are accepted with a warning (the files
  replace commas with spaces)
- Unusually large amounts are accepted with a warning

IMPORTANT: Validation NEVER silently fixes issues.
Errors block the command; warnings are reported alongside the result.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pocket_ledger.config import LedgerSettings, get_settings
from pocket_ledger.models.ledger import (
    TransactionKind,
    ValidationIssue,
    ValidationResult,
    WalletMethod,
    quantize_amount,
)


AmountInput = Union[Decimal, int, float, str]


class LedgerValidationError(ValueError):
    """A command was rejected; state is unchanged."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(result.error_messages) or "invalid input"
        super().__init__(messages)


def _to_decimal(value: AmountInput) -> Optional[Decimal]:
    """Parse and round an amount; None if it is not a finite number."""
    if isinstance(value, bool):
        return None
    try:
        # str() keeps floats like 0.1 from dragging in binary noise
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        if not amount.is_finite():
            return None
        return quantize_amount(amount)
    except (InvalidOperation, ValueError):
        # Also raised when rounding exceeds the decimal context precision
        return None


class TransactionValidator:
    """Validates the inputs of ledger commands."""

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings().ledger

    def _parse_amount(
        self,
        value: AmountInput,
        field: str,
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        amount = _to_decimal(value)
        if amount is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{value!r} is not a valid amount",
                severity="error",
                suggested_fix="Enter a number such as 12.50",
            ))
            return None
        return amount

    def _check_large(self, amount: Decimal, field: str, issues: list[ValidationIssue]) -> None:
        if abs(amount) > self._settings.large_amount_warning:
            issues.append(ValidationIssue(
                field=field,
                issue_type="suspicious_value",
                message=f"Amount ({amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

    def _result(self, issues: list[ValidationIssue], amount: Optional[Decimal]) -> ValidationResult:
        warnings = [issue.message for issue in issues if issue.severity == "warning"]
        is_valid = not any(issue.severity == "error" for issue in issues)
        return ValidationResult(
            is_valid=is_valid,
            issues=issues,
            warnings=warnings,
            amount=amount if is_valid else None,
        )

    def validate_transaction(
        self,
        kind: TransactionKind,
        amount: AmountInput,
        method: WalletMethod,
        note: str = "",
    ) -> ValidationResult:
        """
        Validate a new transaction.

        Args:
            kind: Income or expenditure
            amount: Raw amount as entered
            method: Wallet the money moves through
            note: Free text annotation

        Returns:
            ValidationResult; `amount` holds the rounded amount when valid
        """
        issues: list[ValidationIssue] = []

        if not isinstance(kind, TransactionKind):
            issues.append(ValidationIssue(
                field="kind",
                issue_type="invalid_value",
                message=f"Unknown transaction type {kind!r}",
                severity="error",
            ))
        if not isinstance(method, WalletMethod):
            issues.append(ValidationIssue(
                field="method",
                issue_type="invalid_value",
                message=f"Unknown wallet {method!r}",
                severity="error",
            ))

        parsed = self._parse_amount(amount, "amount", issues)
        if parsed is not None:
            if parsed <= 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                    severity="error",
                    suggested_fix="Enter an amount of at least 0.01",
                ))
            else:
                if parsed > self._settings.note_required_above and not note.strip():
                    issues.append(ValidationIssue(
                        field="note",
                        issue_type="missing",
                        message=(
                            f"A note is required for amounts above "
                            f"{self._settings.note_required_above}"
                        ),
                        severity="error",
                        suggested_fix="Add a short note describing the transaction",
                    ))
                self._check_large(parsed, "amount", issues)

        if "," in note:
            issues.append(ValidationIssue(
                field="note",
                issue_type="lossy",
                message="Commas in the note will be saved as spaces",
                severity="warning",
            ))

        return self._result(issues, parsed)

    def validate_amount_edit(self, new_amount: AmountInput) -> ValidationResult:
        """
        Validate a replacement amount for an existing transaction.

        The note rule is not re-applied; the transaction keeps its note.
        """
        issues: list[ValidationIssue] = []
        parsed = self._parse_amount(new_amount, "amount", issues)
        if parsed is not None:
            if parsed <= 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                    severity="error",
                ))
            else:
                self._check_large(parsed, "amount", issues)
        return self._result(issues, parsed)

    def validate_wallet_balance(self, new_amount: AmountInput) -> ValidationResult:
        """A wallet override may be any finite number, including negative."""
        issues: list[ValidationIssue] = []
        parsed = self._parse_amount(new_amount, "balance", issues)
        if parsed is not None:
            self._check_large(parsed, "balance", issues)
        return self._result(issues, parsed)

    def validate_daily_limit(self, new_limit: AmountInput) -> ValidationResult:
        issues: list[ValidationIssue] = []
        parsed = self._parse_amount(new_limit, "daily_limit", issues)
        if parsed is not None and parsed < 0:
            issues.append(ValidationIssue(
                field="daily_limit",
                issue_type="invalid_value",
                message="Daily limit cannot be negative",
                severity="error",
                suggested_fix="Enter 0 or a positive amount",
            ))
        return self._result(issues, parsed)


def summarize(result: ValidationResult) -> str:
    """
    Generate a user-friendly summary of validation results.

    This is what we show next to the entry form.
    """
    if result.is_valid and not result.warnings:
        return "All checks passed."

    lines = []

    if not result.is_valid:
        lines.append("This entry could not be saved:")
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     {issue.suggested_fix}")

    if result.warnings:
        if lines:
            lines.append("")
        lines.append("Please verify the following:")
        for warning in result.warnings:
            lines.append(f"   • {warning}")

    return "\n".join(lines)

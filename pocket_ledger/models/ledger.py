"""
Core Data Models for Pocket Ledger

These models define the schemas for everything a profile owns:
1. Profiles in the registry index
2. Transactions in the ledger
3. Quick notes sharing the profile folder
4. Derived savings and trend records

DESIGN DECISION: Amounts are Decimal quantized to two places.
Binary floats would make "delete then re-log restores the balance"
depend on rounding luck.
"""

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


CENT = Decimal("0.01")


def quantize_amount(value: Decimal) -> Decimal:
    """Round an amount to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def utc_now() -> datetime:
    """Current instant in UTC, truncated to the precision we persist."""
    return datetime.now(timezone.utc).replace(microsecond=0)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of a transaction."""
    INCOME = "Income"
    EXPENDITURE = "Expenditure"

    @property
    def sign(self) -> int:
        """+1 for income, -1 for expenditure."""
        return 1 if self is TransactionKind.INCOME else -1


class WalletMethod(str, Enum):
    """
    Payment sources whose balances are tracked independently.

    The values are what the flat files store.
    """
    BANK = "Bank"
    MOBILE_WALLET_A = "WeChat"
    MOBILE_WALLET_B = "Alipay"
    CASH = "Cash"
    OTHER = "Others"

    @classmethod
    def from_file_value(cls, value: str) -> "WalletMethod":
        """Unknown wallet names fall back to OTHER."""
        try:
            return cls(value.strip())
        except ValueError:
            return cls.OTHER


class TransactionView(str, Enum):
    """Tabs of the transaction list."""
    EXPENDITURE = "expenditure"
    INCOME = "income"
    ALL = "all"


# =============================================================================
# PROFILES
# =============================================================================

class Profile(BaseModel):
    """
    A user profile.

    The id doubles as the name of the profile's storage folder.
    The name is free text; callers trim and validate it.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Stable identifier, also the folder name"
    )
    name: str = Field(
        default="",
        description="Display name"
    )


# =============================================================================
# LEDGER
# =============================================================================

class Transaction(BaseModel):
    """
    A single ledger entry.

    CRITICAL: Only LedgerStore creates these for live data.
    Creating one by hand does not touch any wallet balance.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    kind: TransactionKind
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount, two decimal places"
    )
    method: WalletMethod
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="Creation instant (UTC)"
    )
    note: str = Field(
        default="",
        description="Free text annotation"
    )
    affects_savings: bool = Field(
        default=True,
        description="Counted by the savings calculator when an expenditure"
    )

    @field_validator("amount")
    @classmethod
    def normalize_amount(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        try:
            return quantize_amount(v)
        except InvalidOperation as e:
            raise ValueError("Amount is too large to round to cents") from e

    @field_validator("timestamp")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        """Naive timestamps are taken to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def signed_amount(self) -> Decimal:
        """Effect of this transaction on its wallet balance."""
        return self.amount * self.kind.sign

    @property
    def local_day(self) -> date:
        """Calendar day of the transaction in the device's local timezone."""
        return self.timestamp.astimezone().date()

    @property
    def is_qualifying_expenditure(self) -> bool:
        """Expenditure that counts toward savings."""
        return self.kind is TransactionKind.EXPENDITURE and self.affects_savings


# =============================================================================
# QUICK NOTES
# =============================================================================

class QuickNote(BaseModel):
    """A to-do style note stored next to the ledger."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4)
    title: str
    detail: str = ""
    deadline: datetime = Field(default_factory=utc_now)
    has_deadline: bool = Field(default=False, alias="hasDeadline")


# =============================================================================
# DERIVED RECORDS
# =============================================================================

class SavingRecord(BaseModel):
    """Saving result of one past day."""

    day: date
    total: Decimal = Field(
        ...,
        description="Qualifying expenditure on that day"
    )
    delta: Decimal = Field(
        ...,
        description="Daily limit minus the day's total; negative means overspent"
    )


class DailyTotal(BaseModel):
    """Sum of one kind of transaction on one local day."""

    day: date
    total: Decimal


class WalletBalance(BaseModel):
    """One row of the balance breakdown."""

    method: WalletMethod
    amount: Decimal

    @property
    def is_overdrawn(self) -> bool:
        return self.amount < 0


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'lossy')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of validating a command's input.

    Errors block the command. Warnings are shown but do not block.
    """

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    # Normalized amount when it could be parsed
    amount: Optional[Decimal] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "error"]


def find_by_id(transactions: list[Transaction], transaction_id: UUID) -> Optional[int]:
    """Index of the transaction with this id, or None."""
    for index, transaction in enumerate(transactions):
        if transaction.id == transaction_id:
            return index
    return None

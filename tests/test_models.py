"""
Tests for Pocket Ledger models

Test strategy:
1. Unit tests for individual components (models, validators, codecs)
2. Integration tests for stores against a temporary data root
3. No shared state between tests (every test gets its own tmp_path)
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from pocket_ledger.models.ledger import (
    Profile,
    QuickNote,
    Transaction,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
    WalletBalance,
    WalletMethod,
    find_by_id,
    quantize_amount,
    utc_now,
)
from pocket_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for ledger-related Pydantic models."""

    def test_transaction_creation(self):
        """Test Transaction model creation with defaults."""
        t = Transaction(
            kind=TransactionKind.EXPENDITURE,
            amount=Decimal("12.5"),
            method=WalletMethod.CASH,
        )
        assert t.amount == Decimal("12.50")
        assert t.note == ""
        assert t.affects_savings is True
        assert t.timestamp.tzinfo is not None

    def test_transaction_rounds_to_cents(self):
        """Test amounts are quantized half-up to two places."""
        t = Transaction(
            kind=TransactionKind.INCOME,
            amount=Decimal("1.005"),
            method=WalletMethod.BANK,
        )
        assert t.amount == Decimal("1.01")

    def test_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(kind=TransactionKind.INCOME, amount=Decimal("0"), method=WalletMethod.BANK)
        with pytest.raises(ValueError):
            Transaction(kind=TransactionKind.INCOME, amount=Decimal("-5"), method=WalletMethod.BANK)

    def test_transaction_rejects_unroundable_amount(self):
        """Test amounts beyond decimal precision fail as a validation error."""
        with pytest.raises(ValueError):
            Transaction(kind=TransactionKind.INCOME, amount=Decimal("1e30"), method=WalletMethod.BANK)

    def test_naive_timestamp_is_utc(self):
        """Test that naive timestamps are taken as UTC."""
        t = Transaction(
            kind=TransactionKind.INCOME,
            amount=Decimal("1"),
            method=WalletMethod.BANK,
            timestamp=datetime(2024, 1, 1, 8, 0),
        )
        assert t.timestamp == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    def test_signed_amount(self):
        """Test income adds and expenditure subtracts."""
        income = Transaction(kind=TransactionKind.INCOME, amount=Decimal("10"), method=WalletMethod.BANK)
        spend = Transaction(kind=TransactionKind.EXPENDITURE, amount=Decimal("10"), method=WalletMethod.BANK)
        assert income.signed_amount == Decimal("10.00")
        assert spend.signed_amount == Decimal("-10.00")

    def test_qualifying_expenditure(self):
        """Test only flagged expenditure counts toward savings."""
        flagged = Transaction(kind=TransactionKind.EXPENDITURE, amount=Decimal("5"), method=WalletMethod.CASH)
        unflagged = flagged.model_copy(update={"affects_savings": False})
        income = Transaction(kind=TransactionKind.INCOME, amount=Decimal("5"), method=WalletMethod.CASH)
        assert flagged.is_qualifying_expenditure
        assert not unflagged.is_qualifying_expenditure
        assert not income.is_qualifying_expenditure

    def test_find_by_id(self):
        """Test lookup by id returns the position or None."""
        a = Transaction(kind=TransactionKind.INCOME, amount=Decimal("1"), method=WalletMethod.BANK)
        b = Transaction(kind=TransactionKind.INCOME, amount=Decimal("2"), method=WalletMethod.BANK)
        assert find_by_id([a, b], b.id) == 1
        assert find_by_id([a, b], uuid4()) is None

    def test_profile_requires_id(self):
        """Test that a profile cannot exist without an id."""
        with pytest.raises(ValueError):
            Profile(name="Nameless")
        assert Profile(id="abc").name == ""

    def test_quick_note_alias(self):
        """Test that quick notes read and write the hasDeadline key."""
        note = QuickNote.model_validate({"title": "Pay rent", "hasDeadline": True})
        assert note.has_deadline is True
        dumped = note.model_dump(mode="json", by_alias=True)
        assert dumped["hasDeadline"] is True
        assert set(dumped) == {"id", "title", "detail", "deadline", "hasDeadline"}

    def test_wallet_balance_overdrawn(self):
        """Test negative balances are flagged as overdrawn."""
        assert WalletBalance(method=WalletMethod.CASH, amount=Decimal("-1")).is_overdrawn
        assert not WalletBalance(method=WalletMethod.CASH, amount=Decimal("0")).is_overdrawn

    def test_helpers(self):
        """Test rounding and clock helpers."""
        assert quantize_amount(Decimal("2.345")) == Decimal("2.35")
        assert utc_now().microsecond == 0
        assert utc_now().tzinfo is timezone.utc


class TestWalletMethod:
    """Tests for the wallet enum."""

    def test_file_values(self):
        """Test the values written to disk."""
        assert [m.value for m in WalletMethod] == ["Bank", "WeChat", "Alipay", "Cash", "Others"]

    def test_unknown_value_maps_to_other(self):
        """Test unknown wallet names fall back to Others."""
        assert WalletMethod.from_file_value("Paypal") is WalletMethod.OTHER
        assert WalletMethod.from_file_value(" Cash ") is WalletMethod.CASH


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_LOGGED,
            description="Test event",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.is_user_action is False

    def test_to_log_dict(self):
        """Test conversion to a flat dictionary for structlog."""
        event = AuditEventBuilder.profile_created("p1", "Alice")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "profile_created"
        assert log_dict["profile_id"] == "p1"
        assert log_dict["details"] == {"name": "Alice"}
        assert isinstance(log_dict["event_id"], str)

    def test_builder_severities(self):
        """Test builders pick the expected severity."""
        assert AuditEventBuilder.persistence_failed("p1", "/x", "disk full").severity == AuditSeverity.ERROR
        assert AuditEventBuilder.validation_failed("p1", "log_transaction", []).severity == AuditSeverity.WARNING
        assert AuditEventBuilder.target_not_found("p1", "transaction", "t", "delete").severity == AuditSeverity.DEBUG

    def test_long_user_text_is_clipped_in_description(self):
        """Test long names and titles fit the description; details keep them whole."""
        name = "A" * 600
        for event in (
            AuditEventBuilder.profile_created("p1", name),
            AuditEventBuilder.profile_renamed("p1", "old", name),
            AuditEventBuilder.profile_deleted("p1", name),
            AuditEventBuilder.note_added("p1", uuid4(), name),
        ):
            assert len(event.description) <= 500
        assert AuditEventBuilder.profile_created("p1", name).details["name"] == name
        assert AuditEventBuilder.note_added("p1", uuid4(), name).details["title"] == name
        assert AuditEventBuilder.profile_created("p1", "Alice").description == "Profile created: 'Alice'"

    def test_transaction_event_carries_entity(self):
        """Test transaction events record the transaction id."""
        transaction_id = uuid4()
        event = AuditEventBuilder.transaction_logged(
            "p1", transaction_id, "Income", "10.00", "Bank"
        )
        assert event.entity_type == "transaction"
        assert event.entity_id == str(transaction_id)


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_error_helpers(self):
        """Test error counting helpers."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(field="amount", issue_type="invalid_value", message="bad", severity="error"),
                ValidationIssue(field="note", issue_type="lossy", message="commas", severity="warning"),
            ],
        )
        assert result.has_errors
        assert result.error_count == 1
        assert result.error_messages == ["bad"]

    def test_issue_severity_pattern(self):
        """Test severity must be error, warning or info."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")

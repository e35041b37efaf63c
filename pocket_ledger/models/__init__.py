"""
Data Models Package

This package contains all Pydantic models used in Pocket Ledger.
All data flowing through the system must conform to these schemas.
"""

from pocket_ledger.models.ledger import (
    DailyTotal,
    Profile,
    QuickNote,
    SavingRecord,
    Transaction,
    TransactionKind,
    TransactionView,
    ValidationIssue,
    ValidationResult,
    WalletBalance,
    WalletMethod,
    quantize_amount,
    utc_now,
)
from pocket_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DailyTotal",
    "Profile",
    "QuickNote",
    "SavingRecord",
    "Transaction",
    "TransactionKind",
    "TransactionView",
    "ValidationIssue",
    "ValidationResult",
    "WalletBalance",
    "WalletMethod",
    "quantize_amount",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

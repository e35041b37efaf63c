"""Validation package."""

from pocket_ledger.validation.validator import (
    LedgerValidationError,
    TransactionValidator,
    summarize,
)

__all__ = ["LedgerValidationError", "TransactionValidator", "summarize"]

"""Ledger package: the per-profile store and views derived from it."""

from pocket_ledger.ledger.savings import SavingsCalculator
from pocket_ledger.ledger.store import LedgerStore
from pocket_ledger.ledger.trends import daily_totals, filter_transactions

__all__ = [
    "LedgerStore",
    "SavingsCalculator",
    "daily_totals",
    "filter_transactions",
]

"""Spending trends: per-day totals for the chart and list-tab filtering."""

from collections import defaultdict
from datetime import date
from decimal import Decimal

from pocket_ledger.models.ledger import (
    DailyTotal,
    Transaction,
    TransactionKind,
    TransactionView,
)


def daily_totals(transactions: list[Transaction], kind: TransactionKind) -> list[DailyTotal]:
    """
    Sum transactions of one kind per local calendar day.

    Returns:
        One entry per day that has such a transaction, oldest first
    """
    totals: dict[date, Decimal] = defaultdict(lambda: Decimal("0.00"))
    for t in transactions:
        if t.kind is kind:
            totals[t.local_day] += t.amount
    return [DailyTotal(day=day, total=total) for day, total in sorted(totals.items())]


def filter_transactions(
    transactions: list[Transaction],
    view: TransactionView,
) -> list[Transaction]:
    """
    Transactions shown under a list tab, order preserved.

    The expenditure tab lists only spending that counts toward savings.
    """
    if view is TransactionView.EXPENDITURE:
        return [t for t in transactions if t.is_qualifying_expenditure]
    if view is TransactionView.INCOME:
        return [t for t in transactions if t.kind is TransactionKind.INCOME]
    return list(transactions)

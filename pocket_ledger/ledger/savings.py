"""
Savings Calculator

A derived view over a LedgerStore: how much of the daily limit was left
unspent today and on every earlier day with qualifying spending.

Days are calendar days in the device's local timezone. Only expenditure
flagged affects_savings counts.
"""

from collections import defaultdict
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from pocket_ledger.ledger.store import LedgerStore
from pocket_ledger.models.ledger import SavingRecord, utc_now


ZERO = Decimal("0.00")


class SavingsCalculator:
    """Reads the store's current state on every call; holds nothing itself."""

    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._clock = clock

    def today(self) -> date:
        return self._clock().astimezone().date()

    def todays_expenditure(self) -> Decimal:
        today = self.today()
        return sum(
            (
                t.amount
                for t in self._store.transactions
                if t.is_qualifying_expenditure and t.local_day == today
            ),
            ZERO,
        )

    def todays_saving(self) -> Decimal:
        """Limit minus today's spending; negative when over the limit."""
        return self._store.daily_limit - self.todays_expenditure()

    def past_saving_records(self) -> list[SavingRecord]:
        """
        One record per earlier day with qualifying spending, most recent first.

        Days without qualifying spending produce no record. Every record
        is measured against the current limit.
        """
        today = self.today()
        limit = self._store.daily_limit

        totals: dict[date, Decimal] = defaultdict(lambda: ZERO)
        for t in self._store.transactions:
            if t.is_qualifying_expenditure and t.local_day != today:
                totals[t.local_day] += t.amount

        return [
            SavingRecord(day=day, total=total, delta=limit - total)
            for day, total in sorted(totals.items(), reverse=True)
        ]

    def overall_saving(self) -> Decimal:
        return self.todays_saving() + sum(
            (record.delta for record in self.past_saving_records()), ZERO
        )

"""
Ledger Store

One profile's transactions, wallet balances and daily savings limit.

DESIGN DECISION: Dual bookkeeping. Every command that adds, removes or
changes a transaction applies the matching signed delta to its wallet
in the same call, so the balance map stays equal to the net of the
ledger. The one exception is set_wallet_balance, an explicit override.

Every command persists what it changed before returning. Persistence
failures are audited; the in-memory state stays authoritative.
"""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pocket_ledger.audit import AuditLogger
from pocket_ledger.config import LedgerSettings, get_settings
from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import (
    Transaction,
    TransactionKind,
    WalletBalance,
    WalletMethod,
    find_by_id,
    utc_now,
)
from pocket_ledger.services.storage import (
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from pocket_ledger.validation import LedgerValidationError, TransactionValidator
from pocket_ledger.validation.validator import AmountInput


ZERO = Decimal("0.00")


def _money(amount: Decimal) -> str:
    return f"{amount:.2f}"


class LedgerStore:
    """
    Ledger state of the active profile.

    Usage:
        store = LedgerStore(FlatFileLedgerStorage(settings))
        store.load(profile.id)
        store.log_transaction(TransactionKind.EXPENDITURE, "25", WalletMethod.CASH, "lunch")
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._storage = storage
        self._settings = settings or get_settings().ledger
        self._validator = validator or TransactionValidator(self._settings)
        self._audit = audit_logger or AuditLogger()
        self._clock = clock

        self._profile_id: Optional[str] = None
        self._transactions: list[Transaction] = []
        self._balances: dict[WalletMethod, Decimal] = {}
        self._daily_limit: Decimal = self._settings.default_daily_limit

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def profile_id(self) -> Optional[str]:
        return self._profile_id

    @property
    def transactions(self) -> list[Transaction]:
        """Transactions, most recent first."""
        return list(self._transactions)

    @property
    def balances(self) -> dict[WalletMethod, Decimal]:
        return dict(self._balances)

    @property
    def daily_limit(self) -> Decimal:
        return self._daily_limit

    def balance_of(self, method: WalletMethod) -> Decimal:
        """Balance of one wallet; wallets never touched read as zero."""
        return self._balances.get(method, ZERO)

    @property
    def total_balance(self) -> Decimal:
        return sum(self._balances.values(), ZERO)

    def balance_breakdown(self) -> list[WalletBalance]:
        """One row per wallet, in a stable order."""
        return [
            WalletBalance(method=method, amount=self.balance_of(method))
            for method in WalletMethod
        ]

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        index = find_by_id(self._transactions, transaction_id)
        return None if index is None else self._transactions[index]

    # =========================================================================
    # LOADING
    # =========================================================================

    def load(self, profile_id: str) -> None:
        """
        Replace the in-memory state with the profile's files.

        Missing or unreadable files fall back to defaults; this never raises.
        """
        self._profile_id = profile_id
        self._transactions = self._load_part(
            lambda: self._storage.load_transactions(profile_id), list
        )
        self._balances = self._load_part(
            lambda: self._storage.load_balances(profile_id), dict
        )
        limit = self._load_part(
            lambda: self._storage.load_daily_limit(profile_id), lambda: None
        )
        self._daily_limit = limit if limit is not None else self._settings.default_daily_limit

        self._audit.log(AuditEventBuilder.ledger_loaded(
            profile_id,
            transaction_count=len(self._transactions),
            wallet_count=len(self._balances),
        ))

    def _load_part(self, reader, default):
        try:
            return reader()
        except NotFoundError:
            return default()
        except StorageError as e:
            self._audit.log_persistence_failed(self._profile_id, e)
            return default()

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def _require_profile(self) -> str:
        if self._profile_id is None:
            raise RuntimeError("No profile loaded; call load() first")
        return self._profile_id

    def _apply(self, method: WalletMethod, delta: Decimal) -> None:
        self._balances[method] = self.balance_of(method) + delta

    def _validated(self, result, command: str) -> Decimal:
        if not result.is_valid:
            self._audit.log_validation_failed(self._profile_id, command, result)
            raise LedgerValidationError(result)
        return result.amount

    def log_transaction(
        self,
        kind: TransactionKind,
        amount: AmountInput,
        method: WalletMethod,
        note: str = "",
        affects_savings: bool = True,
    ) -> Transaction:
        """
        Record a new transaction and apply it to its wallet.

        Raises:
            LedgerValidationError: If the input is rejected (state unchanged)
        """
        profile_id = self._require_profile()
        result = self._validator.validate_transaction(kind, amount, method, note)
        parsed = self._validated(result, "log_transaction")

        transaction = Transaction(
            kind=kind,
            amount=parsed,
            method=method,
            timestamp=self._clock(),
            note=note,
            affects_savings=affects_savings,
        )
        self._transactions.insert(0, transaction)
        self._apply(method, transaction.signed_amount)

        self._save_transactions()
        self._save_balances()
        self._audit.log_transaction_logged(profile_id, transaction)
        return transaction

    def delete_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        """
        Remove a transaction and reverse its effect on its wallet.

        Returns:
            The removed transaction, or None if it was not in the ledger
        """
        profile_id = self._require_profile()
        index = find_by_id(self._transactions, transaction_id)
        if index is None:
            self._audit.log_target_not_found(
                profile_id, "transaction", transaction_id, "delete_transaction"
            )
            return None

        transaction = self._transactions.pop(index)
        self._apply(transaction.method, -transaction.signed_amount)

        self._save_transactions()
        self._save_balances()
        self._audit.log_transaction_deleted(profile_id, transaction)
        return transaction

    def edit_transaction_amount(
        self,
        transaction_id: UUID,
        new_amount: AmountInput,
    ) -> Optional[Transaction]:
        """
        Change a transaction's amount, moving its wallet by the difference.

        Returns:
            The updated transaction, or None if it was not in the ledger

        Raises:
            LedgerValidationError: If the new amount is rejected
        """
        profile_id = self._require_profile()
        index = find_by_id(self._transactions, transaction_id)
        if index is None:
            self._audit.log_target_not_found(
                profile_id, "transaction", transaction_id, "edit_transaction_amount"
            )
            return None

        result = self._validator.validate_amount_edit(new_amount)
        parsed = self._validated(result, "edit_transaction_amount")

        old = self._transactions[index]
        updated = old.model_copy(update={"amount": parsed})
        self._transactions[index] = updated
        self._apply(old.method, updated.signed_amount - old.signed_amount)

        self._save_transactions()
        self._save_balances()
        self._audit.log(AuditEventBuilder.transaction_amount_edited(
            profile_id, transaction_id, _money(old.amount), _money(parsed)
        ))
        return updated

    def set_wallet_balance(self, method: WalletMethod, new_amount: AmountInput) -> Decimal:
        """
        Overwrite one wallet's balance.

        This is the only balance change not derived from a transaction.

        Raises:
            LedgerValidationError: If the amount is not a finite number
        """
        profile_id = self._require_profile()
        result = self._validator.validate_wallet_balance(new_amount)
        parsed = self._validated(result, "set_wallet_balance")

        old = self.balance_of(method)
        self._balances[method] = parsed
        self._save_balances()
        self._audit.log(AuditEventBuilder.wallet_balance_set(
            profile_id, method.value, _money(old), _money(parsed)
        ))
        return parsed

    def set_daily_limit(self, new_limit: AmountInput) -> Decimal:
        """
        Set the daily savings limit.

        Raises:
            LedgerValidationError: If the limit is negative or not a number
        """
        profile_id = self._require_profile()
        result = self._validator.validate_daily_limit(new_limit)
        parsed = self._validated(result, "set_daily_limit")

        old = self._daily_limit
        self._daily_limit = parsed
        try:
            self._storage.save_daily_limit(profile_id, parsed)
        except StorageError as e:
            self._audit.log_persistence_failed(profile_id, e)
        self._audit.log(AuditEventBuilder.daily_limit_set(
            profile_id, _money(old), _money(parsed)
        ))
        return parsed

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _save_transactions(self) -> None:
        try:
            self._storage.save_transactions(self._profile_id, self._transactions)
        except StorageError as e:
            self._audit.log_persistence_failed(self._profile_id, e)

    def _save_balances(self) -> None:
        try:
            self._storage.save_balances(self._profile_id, self._balances)
        except StorageError as e:
            self._audit.log_persistence_failed(self._profile_id, e)

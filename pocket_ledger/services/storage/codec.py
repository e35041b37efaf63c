"""
Row encoding for the flat tabular files.

The files are plain comma-separated text without quoting, so free text
is sanitized by replacement before it is written. Commas and line breaks
become spaces; this is lossy by design of the format.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from pocket_ledger.models.ledger import (
    Transaction,
    TransactionKind,
    WalletMethod,
    quantize_amount,
)


TRANSACTION_HEADER = "id,type,amount,method,date,note,affectsSavings"
BALANCE_HEADER = "wallet,amount"
SAVINGS_HEADER = "dailyLimit"

_FLAG_VALUES = {"true": True, "false": False}


def sanitize_field(text: str) -> str:
    """Make free text safe for a comma-separated row."""
    return (
        text.replace(",", " ")
        .replace("\r\n", " ")
        .replace("\n", " ")
        .replace("\r", " ")
    )


def format_amount(amount: Decimal) -> str:
    return f"{amount:.2f}"


def parse_amount(text: str) -> Optional[Decimal]:
    """Parse a decimal cell rounded to cents; None if it is not a finite number."""
    try:
        value = Decimal(text.strip())
        if not value.is_finite():
            return None
        # Rounding fails for values beyond the context precision
        return quantize_amount(value)
    except (InvalidOperation, ValueError):
        return None


def format_instant(moment: datetime) -> str:
    """Sortable ISO-8601 instant in UTC, e.g. 2024-05-01T09:30:00Z."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_instant(text: str) -> Optional[datetime]:
    text = text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def transaction_to_row(transaction: Transaction) -> str:
    return ",".join([
        str(transaction.id),
        transaction.kind.value,
        format_amount(transaction.amount),
        transaction.method.value,
        format_instant(transaction.timestamp),
        sanitize_field(transaction.note),
        "true" if transaction.affects_savings else "false",
    ])


def row_to_transaction(row: str) -> Optional[Transaction]:
    """
    Decode one ledger row.

    Returns None for rows that are short or malformed. Rows written
    before the affectsSavings column existed count toward savings.
    """
    columns = row.split(",")
    if len(columns) < 6:
        return None

    try:
        transaction_id = UUID(columns[0].strip())
        kind = TransactionKind(columns[1].strip())
    except ValueError:
        return None

    amount = parse_amount(columns[2])
    timestamp = parse_instant(columns[4])
    if amount is None or amount <= 0 or timestamp is None:
        return None

    affects_savings = True
    if len(columns) >= 7:
        flag = _FLAG_VALUES.get(columns[6].strip().lower())
        if flag is None:
            return None
        affects_savings = flag

    return Transaction(
        id=transaction_id,
        kind=kind,
        amount=amount,
        method=WalletMethod.from_file_value(columns[3]),
        timestamp=timestamp,
        note=columns[5],
        affects_savings=affects_savings,
    )


def encode_transactions(transactions: list[Transaction]) -> str:
    lines = [TRANSACTION_HEADER]
    lines.extend(transaction_to_row(t) for t in transactions)
    return "\n".join(lines) + "\n"


def decode_transactions(content: str) -> list[Transaction]:
    transactions = []
    for line in content.splitlines()[1:]:
        if not line.strip():
            continue
        transaction = row_to_transaction(line)
        if transaction is not None:
            transactions.append(transaction)
    return transactions


def encode_balances(balances: dict[WalletMethod, Decimal]) -> str:
    lines = [BALANCE_HEADER]
    # Enum order keeps the file stable between writes
    for method in WalletMethod:
        if method in balances:
            lines.append(f"{method.value},{format_amount(balances[method])}")
    return "\n".join(lines) + "\n"


def decode_balances(content: str) -> dict[WalletMethod, Decimal]:
    balances: dict[WalletMethod, Decimal] = {}
    for line in content.splitlines()[1:]:
        columns = line.split(",")
        if len(columns) < 2:
            continue
        try:
            method = WalletMethod(columns[0].strip())
        except ValueError:
            continue
        amount = parse_amount(columns[1])
        if amount is not None:
            balances[method] = amount
    return balances


def encode_daily_limit(limit: Decimal) -> str:
    return f"{SAVINGS_HEADER}\n{format_amount(limit)}\n"


def decode_daily_limit(content: str) -> Optional[Decimal]:
    lines = content.splitlines()
    if len(lines) < 2:
        return None
    limit = parse_amount(lines[1])
    if limit is None or limit < 0:
        return None
    return limit

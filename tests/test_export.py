"""Tests for the CSV export."""

import asyncio

from decimal import Decimal

from pocket_ledger.config import ExportSettings
from pocket_ledger.models.audit import AuditEventType
from pocket_ledger.models.ledger import TransactionKind, WalletMethod
from pocket_ledger.services.export import EXPORT_HEADER, TransactionExporter, to_csv

from conftest import local_time


def fill(store, clock):
    clock.now = local_time(2024, 5, 9, 8, 5)
    store.log_transaction(TransactionKind.INCOME, "1500", WalletMethod.BANK, "salary")
    clock.now = local_time(2024, 5, 10, 13, 45)
    store.log_transaction(TransactionKind.EXPENDITURE, "8.2", WalletMethod.MOBILE_WALLET_B, "noodles, extra egg")
    store.log_transaction(TransactionKind.EXPENDITURE, "3", WalletMethod.CASH)


class TestToCsv:
    """Tests for CSV formatting."""

    def test_header_and_line_count(self, store, clock):
        """Test one line per transaction plus the header."""
        fill(store, clock)
        lines = to_csv(store.transactions).splitlines()
        assert lines[0] == EXPORT_HEADER == "Type,Amount,Method,Date,Note"
        assert len(lines) == len(store.transactions) + 1

    def test_columns_recover_amounts_and_methods(self, store, clock):
        """Test splitting on commas gives back amounts and methods in order."""
        fill(store, clock)
        rows = [line.split(",") for line in to_csv(store.transactions).splitlines()[1:]]
        assert all(len(row) == 5 for row in rows)
        assert [Decimal(row[1]) for row in rows] == [t.amount for t in store.transactions]
        assert [row[2] for row in rows] == [t.method.value for t in store.transactions]

    def test_row_format(self, store, clock):
        """Test local dates and sanitized notes."""
        fill(store, clock)
        rows = to_csv(store.transactions).splitlines()
        assert rows[2] == "Expenditure,8.20,Alipay,2024-05-10 13:45,noodles  extra egg"
        assert rows[3] == "Income,1500.00,Bank,2024-05-09 08:05,salary"

    def test_empty(self):
        """Test an empty ledger exports only the header."""
        assert to_csv([]) == EXPORT_HEADER + "\n"


class TestTransactionExporter:
    """Tests for writing the export file."""

    def test_export_writes_file(self, store, clock, export_settings, audit_logger, audit_storage):
        """Test the file lands in the export directory."""
        fill(store, clock)
        exporter = TransactionExporter(export_settings, audit_logger)

        path = asyncio.run(exporter.export(store.transactions))
        assert path == export_settings.export_dir / "TransactionsExport.csv"
        assert path.read_text() == to_csv(store.transactions)
        assert audit_storage.get_recent_events(1)[0].event_type == AuditEventType.EXPORT_COMPLETED

    def test_export_failure_returns_none(self, tmp_path, audit_logger, audit_storage):
        """Test an unwritable directory yields None and an audit event."""
        settings = ExportSettings(export_dir=tmp_path / "missing")
        exporter = TransactionExporter(settings, audit_logger)

        assert asyncio.run(exporter.export([])) is None
        assert audit_storage.get_recent_events(1)[0].event_type == AuditEventType.EXPORT_FAILED

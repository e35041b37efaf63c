"""Tests for application wiring."""

import asyncio

import pytest
from decimal import Decimal

from pocket_ledger.config import get_settings
from pocket_ledger.models.ledger import TransactionKind, WalletMethod
from pocket_ledger.orchestrator import LedgerApp, create_app_components


@pytest.fixture
def app(tmp_path, monkeypatch, clock):
    monkeypatch.setenv("LEDGER_STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LEDGER_EXPORT_EXPORT_DIR", str(tmp_path))
    monkeypatch.setenv("LEDGER_DEFAULT_DAILY_LIMIT", "50")
    get_settings.cache_clear()
    yield create_app_components(clock=clock)
    get_settings.cache_clear()


class TestCreateAppComponents:
    """Tests for the factory and profile sessions."""

    def test_factory(self, app):
        """Test the factory returns an app with an empty registry."""
        assert isinstance(app, LedgerApp)
        assert app.profiles() == []
        assert app.session is None

    def test_activate(self, app):
        """Test activating a profile loads its state with configured defaults."""
        profile = app.registry.create_profile("Alice")
        session = app.activate(profile.id)

        assert app.session is session
        assert session.store.profile_id == profile.id
        assert session.store.daily_limit == Decimal("50.00")
        assert session.notes.notes == []

    def test_session_round_trip(self, app):
        """Test work done in one session is visible in the next."""
        profile = app.registry.create_profile("Alice")
        session = app.activate(profile.id)
        session.store.log_transaction(TransactionKind.EXPENDITURE, "12", WalletMethod.CASH)
        session.notes.add_note("remember")

        again = app.activate(profile.id)
        assert again is not session
        assert again.store.transactions == session.store.transactions
        assert [n.title for n in again.notes.notes] == ["remember"]
        assert again.savings.todays_saving() == Decimal("38.00")

    def test_profiles_are_isolated(self, app):
        """Test two profiles do not share ledgers."""
        alice = app.registry.create_profile("Alice")
        bob = app.registry.create_profile("Bob")
        app.activate(alice.id).store.log_transaction(TransactionKind.INCOME, "5", WalletMethod.BANK)
        assert app.activate(bob.id).store.transactions == []

    def test_delete_active_profile(self, app):
        """Test deleting the active profile closes its session."""
        profile = app.registry.create_profile("Alice")
        app.activate(profile.id)
        assert app.delete_profile(profile.id) is True
        assert app.session is None
        assert app.profiles() == []

    def test_export(self, app, tmp_path):
        """Test the session exports into the configured directory."""
        profile = app.registry.create_profile("Alice")
        session = app.activate(profile.id)
        session.store.log_transaction(TransactionKind.INCOME, "5", WalletMethod.BANK)

        path = asyncio.run(session.export_transactions())
        assert path == tmp_path / "TransactionsExport.csv"
        assert len(path.read_text().splitlines()) == 2

    def test_audit_trail(self, app):
        """Test commands reach the in-memory audit trail."""
        profile = app.registry.create_profile("Alice")
        app.activate(profile.id)
        events = app.audit_logger.storage.get_events_for_profile(profile.id)
        assert len(events) >= 2

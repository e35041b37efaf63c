"""Shared fixtures: every test gets its own data root under tmp_path."""

from datetime import datetime, timedelta

import pytest

from pocket_ledger.audit import AuditLogger
from pocket_ledger.config import ExportSettings, LedgerSettings, StorageSettings
from pocket_ledger.ledger import LedgerStore
from pocket_ledger.profiles import ProfileRegistry
from pocket_ledger.services.storage import (
    FlatFileLedgerStorage,
    FlatFileProfileStorage,
    InMemoryAuditStorage,
)


def local_time(year, month, day, hour=12, minute=0):
    """An aware datetime for a wall-clock time in the local timezone."""
    return datetime(year, month, day, hour, minute).astimezone()


class FixedClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(local_time(2024, 5, 10, 12, 0))


@pytest.fixture
def storage_settings(tmp_path):
    return StorageSettings(data_dir=tmp_path / "data")


@pytest.fixture
def ledger_settings():
    return LedgerSettings()


@pytest.fixture
def export_settings(tmp_path):
    export_dir = tmp_path / "export"
    export_dir.mkdir()
    return ExportSettings(export_dir=export_dir)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage(max_events=500)


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def profile_storage(storage_settings):
    return FlatFileProfileStorage(storage_settings)


@pytest.fixture
def ledger_storage(storage_settings):
    return FlatFileLedgerStorage(storage_settings)


@pytest.fixture
def registry(profile_storage, audit_logger):
    return ProfileRegistry(profile_storage, audit_logger=audit_logger)


@pytest.fixture
def profile(registry):
    return registry.create_profile("Alice")


@pytest.fixture
def make_store(ledger_storage, audit_logger, ledger_settings, clock):
    """Build a store for a profile id, already loaded."""
    def _make(profile_id):
        store = LedgerStore(
            ledger_storage,
            audit_logger=audit_logger,
            settings=ledger_settings,
            clock=clock,
        )
        store.load(profile_id)
        return store
    return _make


@pytest.fixture
def store(make_store, profile):
    return make_store(profile.id)

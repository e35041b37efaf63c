"""Tests for the audit logger and settings."""

from pathlib import Path

from pocket_ledger.audit import AuditLogger
from pocket_ledger.config import ExportSettings, get_settings, validate_all_settings
from pocket_ledger.models.audit import AuditEventBuilder, AuditEventType
from pocket_ledger.services.storage import InMemoryAuditStorage, PersistenceError

import pytest


class FailingAuditStorage(InMemoryAuditStorage):
    def append_event(self, event):
        raise RuntimeError("audit sink unavailable")


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_logs_to_storage(self, audit_logger, audit_storage):
        """Test events are appended to the storage."""
        assert audit_logger.log(AuditEventBuilder.profile_created("p1", "Alice")) is True
        assert len(audit_storage) == 1

    def test_local_only(self):
        """Test logging without storage succeeds."""
        logger = AuditLogger()
        assert logger.log(AuditEventBuilder.profile_deleted("p1", "Alice")) is True

    def test_storage_failure_is_swallowed(self):
        """Test a failing audit storage does not raise."""
        logger = AuditLogger(FailingAuditStorage(max_events=10))
        assert logger.log(AuditEventBuilder.profile_created("p1", "Alice")) is False

    def test_persistence_failure_records_path(self, audit_logger, audit_storage):
        """Test the failing path is kept on the event."""
        error = PersistenceError(Path("/data/p1/savings.csv"), "disk full")
        audit_logger.log_persistence_failed("p1", error)

        event = audit_storage.get_recent_events(1)[0]
        assert event.event_type == AuditEventType.PERSISTENCE_FAILED
        assert event.entity_id == "/data/p1/savings.csv"
        assert event.error_message == "disk full"


class TestSettings:
    """Tests for configuration."""

    def test_defaults(self, monkeypatch):
        """Test default file names and business rules."""
        monkeypatch.delenv("LEDGER_DEFAULT_DAILY_LIMIT", raising=False)
        get_settings.cache_clear()
        settings = get_settings()
        assert settings.storage.profiles_index_filename == "profiles.json"
        assert settings.storage.transactions_filename == "transactions.csv"
        assert str(settings.ledger.default_daily_limit) == "70.00"
        assert settings.export.export_filename == "TransactionsExport.csv"
        get_settings.cache_clear()

    def test_export_date_format_rejects_commas(self):
        """Test a comma in the date format is refused."""
        with pytest.raises(ValueError):
            ExportSettings(date_format="%b %d, %Y")

    def test_validate_all_settings(self, monkeypatch):
        """Test the startup check reports a broken group."""
        monkeypatch.setenv("LEDGER_EXPORT_DATE_FORMAT", "%d,%m")
        get_settings.cache_clear()
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["export"] is False
        assert "export_error" in results
        get_settings.cache_clear()

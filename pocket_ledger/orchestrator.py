"""
Main Orchestrator for Pocket Ledger

This module ties together all the components:
1. Settings → storage backends → audit logger → profile registry
2. Activating a profile → its ledger store, quick notes, savings view
   and exporter

DESIGN DECISION: Wiring is explicit. Nothing below this module reaches
for a global; each component receives its collaborators. The UI holds
one LedgerApp and at most one active ProfileSession.
"""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Optional

from pocket_ledger.audit import AuditLogger
from pocket_ledger.config import Settings, get_settings
from pocket_ledger.ledger import LedgerStore, SavingsCalculator
from pocket_ledger.models.ledger import Profile, utc_now
from pocket_ledger.notes import QuickNoteStore
from pocket_ledger.profiles import ProfileRegistry
from pocket_ledger.services.export import TransactionExporter
from pocket_ledger.services.storage import (
    FlatFileLedgerStorage,
    FlatFileProfileStorage,
    InMemoryAuditStorage,
    LedgerStorageInterface,
)
from pocket_ledger.validation import TransactionValidator


class ProfileSession:
    """
    Everything the UI needs for one active profile.

    Created by LedgerApp.activate(); the stores are already loaded.
    """

    def __init__(
        self,
        profile_id: str,
        store: LedgerStore,
        notes: QuickNoteStore,
        savings: SavingsCalculator,
        exporter: TransactionExporter,
    ):
        self.profile_id = profile_id
        self.store = store
        self.notes = notes
        self.savings = savings
        self.exporter = exporter

    async def export_transactions(self) -> Optional[Path]:
        """Export the current ledger, most recent first."""
        return await self.exporter.export(self.store.transactions)


class LedgerApp:
    """
    Application root.

    Owns the registry and hands out sessions for individual profiles.
    """

    def __init__(
        self,
        settings: Settings,
        registry: ProfileRegistry,
        ledger_storage: LedgerStorageInterface,
        audit_logger: AuditLogger,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._settings = settings
        self._ledger_settings = settings.ledger
        self._export_settings = settings.export
        self.registry = registry
        self.audit_logger = audit_logger
        self._ledger_storage = ledger_storage
        self._clock = clock
        self._session: Optional[ProfileSession] = None

    @property
    def session(self) -> Optional[ProfileSession]:
        return self._session

    def profiles(self) -> list[Profile]:
        return self.registry.list_profiles()

    def activate(self, profile_id: str) -> ProfileSession:
        """
        Load a profile and make it the active session.

        The previous session, if any, is dropped. An id without files
        (including one just deleted) activates with default state.
        """
        validator = TransactionValidator(self._ledger_settings)
        store = LedgerStore(
            self._ledger_storage,
            validator=validator,
            audit_logger=self.audit_logger,
            settings=self._ledger_settings,
            clock=self._clock,
        )
        store.load(profile_id)

        notes = QuickNoteStore(self._ledger_storage, audit_logger=self.audit_logger)
        notes.load(profile_id)

        self._session = ProfileSession(
            profile_id=profile_id,
            store=store,
            notes=notes,
            savings=SavingsCalculator(store, clock=self._clock),
            exporter=TransactionExporter(self._export_settings, self.audit_logger),
        )
        return self._session

    def deactivate(self) -> None:
        self._session = None

    def delete_profile(self, profile_id: str) -> bool:
        """Delete a profile, closing its session if it is the active one."""
        if self._session is not None and self._session.profile_id == profile_id:
            self._session = None
        return self.registry.delete_profile(profile_id)


def create_app_components(
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = utc_now,
) -> LedgerApp:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to get_settings().
        clock: Source of "now"; tests pass a fixed clock.

    Returns:
        LedgerApp with the profile index already loaded
    """
    settings = settings or get_settings()
    storage_settings = settings.storage

    audit_storage = InMemoryAuditStorage(settings.app.audit_history_size)
    audit_logger = AuditLogger(audit_storage)

    registry = ProfileRegistry(
        FlatFileProfileStorage(storage_settings),
        audit_logger=audit_logger,
    )

    return LedgerApp(
        settings=settings,
        registry=registry,
        ledger_storage=FlatFileLedgerStorage(storage_settings),
        audit_logger=audit_logger,
        clock=clock,
    )

"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the flat-file layout out of the ledger's business rules
2. Use temporary directories or fakes in tests
3. Swap to a database later without touching LedgerStore

The interface is intentionally simple. Every save is a whole-collection
rewrite; there are no partial updates.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pocket_ledger.models.audit import AuditEvent
from pocket_ledger.models.ledger import (
    Profile,
    QuickNote,
    Transaction,
    WalletMethod,
)


class ProfileIndexStorageInterface(ABC):
    """
    Abstract interface for the profile index and profile folders.
    """

    @abstractmethod
    def load_profiles(self) -> list[Profile]:
        """
        Load the persisted profile list in stored order.

        Raises:
            NotFoundError: If no index has been written yet
            PersistenceError: If the index cannot be read or parsed
        """
        pass

    @abstractmethod
    def save_profiles(self, profiles: list[Profile]) -> None:
        """
        Replace the persisted profile list.

        Raises:
            PersistenceError: If the index cannot be written
        """
        pass

    @abstractmethod
    def profile_folder(self, profile_id: str) -> Path:
        """
        Folder holding one profile's data.

        Raises:
            NotFoundError: If the id cannot name a folder
        """
        pass

    @abstractmethod
    def create_profile_folder(self, profile_id: str) -> Path:
        """
        Create the profile's folder (no-op if it exists).

        Raises:
            PersistenceError: If the folder cannot be created
        """
        pass

    @abstractmethod
    def remove_profile_folder(self, profile_id: str) -> bool:
        """
        Recursively remove the profile's folder.

        Returns:
            True if a folder was removed, False if there was none

        Raises:
            PersistenceError: If removal fails
        """
        pass


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the per-profile ledger files.

    Load methods raise NotFoundError when the profile has never written
    that piece of state, so callers can fall back to defaults.
    """

    @abstractmethod
    def load_transactions(self, profile_id: str) -> list[Transaction]:
        """Load the ledger, most recent first. Malformed rows are skipped."""
        pass

    @abstractmethod
    def save_transactions(self, profile_id: str, transactions: list[Transaction]) -> None:
        """Rewrite the ledger file."""
        pass

    @abstractmethod
    def load_balances(self, profile_id: str) -> dict[WalletMethod, Decimal]:
        """Load the wallet balance breakdown. Malformed rows are skipped."""
        pass

    @abstractmethod
    def save_balances(self, profile_id: str, balances: dict[WalletMethod, Decimal]) -> None:
        """Rewrite the balance breakdown file."""
        pass

    @abstractmethod
    def load_daily_limit(self, profile_id: str) -> Optional[Decimal]:
        """Load the daily savings limit, or None if the file is malformed."""
        pass

    @abstractmethod
    def save_daily_limit(self, profile_id: str, limit: Decimal) -> None:
        """Rewrite the savings file."""
        pass

    @abstractmethod
    def load_quick_notes(self, profile_id: str) -> list[QuickNote]:
        """Load the profile's quick notes. Malformed entries are skipped."""
        pass

    @abstractmethod
    def save_quick_notes(self, profile_id: str, notes: list[QuickNote]) -> None:
        """Rewrite the quick notes file."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit event storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Returns:
            True if stored successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass

    @abstractmethod
    def get_events_for_profile(self, profile_id: str) -> list[AuditEvent]:
        """All retained events for one profile in chronological order."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class PersistenceError(StorageError):
    """A file could not be read or written."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)

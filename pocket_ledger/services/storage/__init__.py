"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements per-profile flat files as the backend, but designed
to be swappable.
"""

from pocket_ledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    NotFoundError,
    PersistenceError,
    ProfileIndexStorageInterface,
    StorageError,
)
from pocket_ledger.services.storage.flat_files import (
    FlatFileLedgerStorage,
    FlatFileProfileStorage,
    atomic_write_text,
)
from pocket_ledger.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    "ProfileIndexStorageInterface",
    # Exceptions
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    # Flat file implementation
    "FlatFileLedgerStorage",
    "FlatFileProfileStorage",
    "atomic_write_text",
    # In-memory audit trail
    "InMemoryAuditStorage",
]

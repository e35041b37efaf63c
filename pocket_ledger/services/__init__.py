"""Services package."""

from pocket_ledger.services.storage import (
    AuditStorageInterface,
    FlatFileLedgerStorage,
    FlatFileProfileStorage,
    InMemoryAuditStorage,
    LedgerStorageInterface,
    NotFoundError,
    PersistenceError,
    ProfileIndexStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "FlatFileLedgerStorage",
    "FlatFileProfileStorage",
    "InMemoryAuditStorage",
    "LedgerStorageInterface",
    "NotFoundError",
    "PersistenceError",
    "ProfileIndexStorageInterface",
    "StorageError",
]

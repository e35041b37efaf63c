"""
Audit Models for Pocket Ledger

Every command against the registry or a profile's stores is logged.
This provides:
1. Traceability of every balance change
2. Debugging information when a file could not be written
3. A recent-activity feed the UI can show

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Registry
    PROFILE_CREATED = "profile_created"
    PROFILE_RENAMED = "profile_renamed"
    PROFILE_DELETED = "profile_deleted"

    # Ledger
    LEDGER_LOADED = "ledger_loaded"
    TRANSACTION_LOGGED = "transaction_logged"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_AMOUNT_EDITED = "transaction_amount_edited"
    WALLET_BALANCE_SET = "wallet_balance_set"
    DAILY_LIMIT_SET = "daily_limit_set"
    VALIDATION_FAILED = "validation_failed"

    # Quick notes
    NOTE_ADDED = "note_added"
    NOTE_DELETED = "note_deleted"

    # Export
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"

    # Commands that referenced something that no longer exists
    TARGET_NOT_FOUND = "target_not_found"

    # System events
    PERSISTENCE_FAILED = "persistence_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every command creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - which profile, and what entity inside it?
    profile_id: Optional[str] = None
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'wallet', 'file')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user command?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "profile_id": self.profile_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


DESCRIPTION_TEXT_LIMIT = 60


def _clip(text: str, limit: int = DESCRIPTION_TEXT_LIMIT) -> str:
    """Shorten user text quoted in a description; the full text goes in details."""
    if len(text) <= limit:
        return repr(text)
    return repr(text[:limit]) + "..."


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.profile_created(profile_id, name)
        event = AuditEventBuilder.persistence_failed(profile_id, path, error)
    """

    @staticmethod
    def profile_created(profile_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_CREATED,
            profile_id=profile_id,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Profile created: {_clip(name)}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def profile_renamed(profile_id: str, old_name: str, new_name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_RENAMED,
            profile_id=profile_id,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Profile renamed to {_clip(new_name)}",
            details={"old_name": old_name, "new_name": new_name},
            is_user_action=True,
        )

    @staticmethod
    def profile_deleted(profile_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_DELETED,
            profile_id=profile_id,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Profile deleted: {_clip(name)}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(
        profile_id: str,
        transaction_count: int,
        wallet_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            severity=AuditSeverity.DEBUG,
            profile_id=profile_id,
            description=f"Ledger loaded with {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "wallet_count": wallet_count,
            },
        )

    @staticmethod
    def transaction_logged(
        profile_id: str,
        transaction_id: UUID,
        kind: str,
        amount: str,
        method: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_LOGGED,
            profile_id=profile_id,
            entity_type="transaction",
            entity_id=str(transaction_id),
            description=f"{kind} of {amount} logged on {method}",
            details={"kind": kind, "amount": amount, "method": method},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        profile_id: str,
        transaction_id: UUID,
        kind: str,
        amount: str,
        method: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            profile_id=profile_id,
            entity_type="transaction",
            entity_id=str(transaction_id),
            description=f"{kind} of {amount} on {method} deleted",
            details={"kind": kind, "amount": amount, "method": method},
            is_user_action=True,
        )

    @staticmethod
    def transaction_amount_edited(
        profile_id: str,
        transaction_id: UUID,
        old_amount: str,
        new_amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_AMOUNT_EDITED,
            profile_id=profile_id,
            entity_type="transaction",
            entity_id=str(transaction_id),
            description=f"Transaction amount changed from {old_amount} to {new_amount}",
            details={"old_amount": old_amount, "new_amount": new_amount},
            is_user_action=True,
        )

    @staticmethod
    def wallet_balance_set(
        profile_id: str,
        method: str,
        old_amount: str,
        new_amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WALLET_BALANCE_SET,
            profile_id=profile_id,
            entity_type="wallet",
            entity_id=method,
            description=f"{method} balance overridden: {old_amount} -> {new_amount}",
            details={"old_amount": old_amount, "new_amount": new_amount},
            is_user_action=True,
        )

    @staticmethod
    def daily_limit_set(profile_id: str, old_limit: str, new_limit: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DAILY_LIMIT_SET,
            profile_id=profile_id,
            entity_type="savings",
            description=f"Daily savings limit set to {new_limit}",
            details={"old_limit": old_limit, "new_limit": new_limit},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        profile_id: Optional[str],
        command: str,
        issues: list[dict],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            profile_id=profile_id,
            description=f"{command} rejected with {len(issues)} issues",
            details={"command": command, "issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def note_added(profile_id: str, note_id: UUID, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTE_ADDED,
            profile_id=profile_id,
            entity_type="note",
            entity_id=str(note_id),
            description=f"Quick note added: {_clip(title)}",
            details={"title": title},
            is_user_action=True,
        )

    @staticmethod
    def note_deleted(profile_id: str, note_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTE_DELETED,
            profile_id=profile_id,
            entity_type="note",
            entity_id=str(note_id),
            description="Quick note deleted",
            is_user_action=True,
        )

    @staticmethod
    def export_completed(path: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="file",
            entity_id=path,
            description=f"Exported {row_count} transactions",
            details={"path": path, "row_count": row_count},
            is_user_action=True,
        )

    @staticmethod
    def export_failed(path: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="file",
            entity_id=path,
            description="Transaction export could not be written",
            error_message=error_message,
        )

    @staticmethod
    def target_not_found(
        profile_id: Optional[str],
        entity_type: str,
        entity_id: str,
        command: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TARGET_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            profile_id=profile_id,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{command} ignored: {entity_type} not found",
            details={"command": command},
        )

    @staticmethod
    def persistence_failed(
        profile_id: Optional[str],
        path: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            profile_id=profile_id,
            entity_type="file",
            entity_id=path,
            description="File could not be read or written; keeping in-memory state",
            error_message=error_message,
        )

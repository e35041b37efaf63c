"""
Audit Logger

DESIGN DECISION: Every command against the registry or a profile's
stores is logged. This provides:
1. Traceability of every balance change
2. A record of files that could not be written
3. A recent-activity feed for the UI

The audit logger:
- Is synchronous, like the commands that call it
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from pocket_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from pocket_ledger.models.ledger import Transaction, ValidationResult
from pocket_ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def _money(amount: Decimal) -> str:
    return f"{amount:.2f}"


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional audit storage (recent activity)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the event trail.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("pocket_ledger.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to storage if available.

        Returns True if the storage append succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity is AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity is AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_transaction_logged(self, profile_id: str, transaction: Transaction) -> None:
        self.log(AuditEventBuilder.transaction_logged(
            profile_id=profile_id,
            transaction_id=transaction.id,
            kind=transaction.kind.value,
            amount=_money(transaction.amount),
            method=transaction.method.value,
        ))

    def log_transaction_deleted(self, profile_id: str, transaction: Transaction) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            profile_id=profile_id,
            transaction_id=transaction.id,
            kind=transaction.kind.value,
            amount=_money(transaction.amount),
            method=transaction.method.value,
        ))

    def log_validation_failed(
        self,
        profile_id: Optional[str],
        command: str,
        result: ValidationResult,
    ) -> None:
        """Log a command rejected by validation."""
        issues = [issue.model_dump() for issue in result.issues if issue.severity == "error"]
        self.log(AuditEventBuilder.validation_failed(
            profile_id=profile_id,
            command=command,
            issues=issues,
        ))

    def log_target_not_found(
        self,
        profile_id: Optional[str],
        entity_type: str,
        entity_id: UUID | str,
        command: str,
    ) -> None:
        self.log(AuditEventBuilder.target_not_found(
            profile_id=profile_id,
            entity_type=entity_type,
            entity_id=str(entity_id),
            command=command,
        ))

    def log_persistence_failed(
        self,
        profile_id: Optional[str],
        error: Exception,
    ) -> None:
        """Log a storage failure that the caller recovered from."""
        path = getattr(error, "path", None)
        self.log(AuditEventBuilder.persistence_failed(
            profile_id=profile_id,
            path=str(path) if path is not None else "",
            error_message=str(error),
        ))

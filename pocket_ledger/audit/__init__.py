"""Audit logging package."""

from pocket_ledger.audit.logger import AuditLogger

__all__ = ["AuditLogger"]

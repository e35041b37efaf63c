"""
In-memory audit storage.

Keeps a bounded window of recent events for the session so the UI can
show a recent-activity list. Nothing is written to disk.
"""

from collections import deque
from typing import Optional

from pocket_ledger.config import get_settings
from pocket_ledger.models.audit import AuditEvent
from pocket_ledger.services.storage.interface import AuditStorageInterface


class InMemoryAuditStorage(AuditStorageInterface):
    """Ring buffer of the most recent audit events."""

    def __init__(self, max_events: Optional[int] = None):
        size = max_events or get_settings().app.audit_history_size
        self._events: deque[AuditEvent] = deque(maxlen=size)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(self, limit: int = 50) -> list[AuditEvent]:
        events = list(self._events)
        events.reverse()
        return events[:limit]

    def get_events_for_profile(self, profile_id: str) -> list[AuditEvent]:
        return [event for event in self._events if event.profile_id == profile_id]

    def __len__(self) -> int:
        return len(self._events)

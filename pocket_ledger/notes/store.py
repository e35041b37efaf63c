"""
Quick Note Store

To-do style notes kept in the profile folder next to the ledger.
Same rules as the ledger: commands persist immediately, failures are
audited and the in-memory list stays authoritative.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pocket_ledger.audit import AuditLogger
from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import QuickNote
from pocket_ledger.services.storage import (
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)


class QuickNoteStore:
    """Notes of the active profile, in the order they were added."""

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._profile_id: Optional[str] = None
        self._notes: list[QuickNote] = []

    @property
    def notes(self) -> list[QuickNote]:
        return list(self._notes)

    def load(self, profile_id: str) -> None:
        """Read the profile's notes; an unreadable file means no notes."""
        self._profile_id = profile_id
        try:
            self._notes = self._storage.load_quick_notes(profile_id)
        except NotFoundError:
            self._notes = []
        except StorageError as e:
            self._audit.log_persistence_failed(profile_id, e)
            self._notes = []

    def _require_profile(self) -> str:
        if self._profile_id is None:
            raise RuntimeError("No profile loaded; call load() first")
        return self._profile_id

    def _persist(self) -> None:
        try:
            self._storage.save_quick_notes(self._profile_id, self._notes)
        except StorageError as e:
            self._audit.log_persistence_failed(self._profile_id, e)

    def add_note(
        self,
        title: str,
        detail: str = "",
        deadline: Optional[datetime] = None,
    ) -> QuickNote:
        """Add a note; it has a deadline only when one is given."""
        profile_id = self._require_profile()
        if deadline is None:
            note = QuickNote(title=title, detail=detail)
        else:
            note = QuickNote(title=title, detail=detail, deadline=deadline, has_deadline=True)

        self._notes.append(note)
        self._persist()
        self._audit.log(AuditEventBuilder.note_added(profile_id, note.id, title))
        return note

    def delete_note(self, note_id: UUID) -> bool:
        profile_id = self._require_profile()
        remaining = [note for note in self._notes if note.id != note_id]
        if len(remaining) == len(self._notes):
            self._audit.log_target_not_found(profile_id, "note", note_id, "delete_note")
            return False

        self._notes = remaining
        self._persist()
        self._audit.log(AuditEventBuilder.note_deleted(profile_id, note_id))
        return True

"""Quick notes package."""

from pocket_ledger.notes.store import QuickNoteStore

__all__ = ["QuickNoteStore"]

"""
Flat File Storage Implementation

DESIGN DECISION: Each profile owns a folder named after its id, holding
small text files the user can open in any spreadsheet:
- transactions.csv
- balance_breakdown.csv
- savings.csv
- quickNotes.json

The profile index lives next to those folders as profiles.json.

TRADEOFFS:
- Every write rewrites the whole file (fine for one person's ledger)
- Each file is replaced atomically, but the set of files is not
  transactional: a crash between two writes can leave them inconsistent
- No locking; two processes writing the same profile is unsupported
"""

import json
import os
import shutil
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pocket_ledger.config import StorageSettings, get_settings
from pocket_ledger.models.ledger import (
    Profile,
    QuickNote,
    Transaction,
    WalletMethod,
)
from pocket_ledger.services.storage import codec
from pocket_ledger.services.storage.interface import (
    LedgerStorageInterface,
    NotFoundError,
    PersistenceError,
    ProfileIndexStorageInterface,
)


def atomic_write_text(path: Path, content: str) -> None:
    """
    Write a file by writing a sibling temp file and renaming it over the target.

    Readers see either the old or the new content, never a truncated file.

    Raises:
        PersistenceError: If the file cannot be written
    """
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistenceError(path, f"Failed to write {path}: {e}") from e


def read_text(path: Path) -> str:
    """
    Read a whole file.

    Raises:
        NotFoundError: If the file does not exist
        PersistenceError: If it exists but cannot be read
    """
    if not path.exists():
        raise NotFoundError(f"No file at {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(path, f"Failed to read {path}: {e}") from e


def _folder_for(data_dir: Path, profile_id: str) -> Path:
    # Ids are folder names; anything that would escape the data root is unknown
    if not profile_id or profile_id in {".", ".."} or Path(profile_id).name != profile_id:
        raise NotFoundError(f"Not a valid profile id: {profile_id!r}")
    return data_dir / profile_id


class FlatFileProfileStorage(ProfileIndexStorageInterface):
    """
    Profile index as a JSON array of {"id", "name"} records.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    @property
    def index_path(self) -> Path:
        return self._settings.profiles_index_path

    def load_profiles(self) -> list[Profile]:
        """Load profiles; entries that are not valid records are skipped."""
        content = read_text(self.index_path)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise PersistenceError(self.index_path, f"Profile index is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(self.index_path, "Profile index is not a JSON array")

        profiles = []
        seen_ids = set()
        for entry in data:
            try:
                profile = Profile.model_validate(entry)
                _folder_for(self._settings.data_dir, profile.id)
            except (ValidationError, NotFoundError):
                continue  # Skip malformed entries
            if profile.id in seen_ids:
                continue
            seen_ids.add(profile.id)
            profiles.append(profile)
        return profiles

    def save_profiles(self, profiles: list[Profile]) -> None:
        try:
            self._settings.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(self._settings.data_dir, f"Failed to create data root: {e}") from e
        payload = [profile.model_dump() for profile in profiles]
        atomic_write_text(self.index_path, json.dumps(payload, indent=2))

    def profile_folder(self, profile_id: str) -> Path:
        return _folder_for(self._settings.data_dir, profile_id)

    def create_profile_folder(self, profile_id: str) -> Path:
        folder = self.profile_folder(profile_id)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(folder, f"Failed to create folder {folder}: {e}") from e
        return folder

    def remove_profile_folder(self, profile_id: str) -> bool:
        folder = self.profile_folder(profile_id)
        if not folder.exists():
            return False
        try:
            shutil.rmtree(folder)
        except OSError as e:
            raise PersistenceError(folder, f"Failed to remove folder {folder}: {e}") from e
        return True


class FlatFileLedgerStorage(LedgerStorageInterface):
    """
    Per-profile ledger files.

    Writes go into an existing profile folder only. A folder that the
    registry failed to create (or already deleted) makes every write fail
    with PersistenceError rather than silently resurrecting the profile.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    def _path(self, profile_id: str, filename: str) -> Path:
        return _folder_for(self._settings.data_dir, profile_id) / filename

    def load_transactions(self, profile_id: str) -> list[Transaction]:
        path = self._path(profile_id, self._settings.transactions_filename)
        return codec.decode_transactions(read_text(path))

    def save_transactions(self, profile_id: str, transactions: list[Transaction]) -> None:
        path = self._path(profile_id, self._settings.transactions_filename)
        atomic_write_text(path, codec.encode_transactions(transactions))

    def load_balances(self, profile_id: str) -> dict[WalletMethod, Decimal]:
        path = self._path(profile_id, self._settings.balances_filename)
        return codec.decode_balances(read_text(path))

    def save_balances(self, profile_id: str, balances: dict[WalletMethod, Decimal]) -> None:
        path = self._path(profile_id, self._settings.balances_filename)
        atomic_write_text(path, codec.encode_balances(balances))

    def load_daily_limit(self, profile_id: str) -> Optional[Decimal]:
        path = self._path(profile_id, self._settings.savings_filename)
        return codec.decode_daily_limit(read_text(path))

    def save_daily_limit(self, profile_id: str, limit: Decimal) -> None:
        path = self._path(profile_id, self._settings.savings_filename)
        atomic_write_text(path, codec.encode_daily_limit(limit))

    def load_quick_notes(self, profile_id: str) -> list[QuickNote]:
        path = self._path(profile_id, self._settings.quick_notes_filename)
        content = read_text(path)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise PersistenceError(path, f"Quick notes are not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(path, "Quick notes file is not a JSON array")

        notes = []
        for entry in data:
            try:
                notes.append(QuickNote.model_validate(entry))
            except ValidationError:
                continue  # Skip malformed notes
        return notes

    def save_quick_notes(self, profile_id: str, notes: list[QuickNote]) -> None:
        path = self._path(profile_id, self._settings.quick_notes_filename)
        payload = [note.model_dump(mode="json", by_alias=True) for note in notes]
        atomic_write_text(path, json.dumps(payload, indent=2))

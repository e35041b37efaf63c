"""
Profile Registry

Owns the list of profiles and the lifecycle of their folders.

DESIGN DECISION: The in-memory list is authoritative for the session.
Failures to read or write the index, or to create or remove a folder,
are audited and otherwise ignored; a profile the user just created is
never "un-created" because the disk refused a write.
"""

from pathlib import Path
from typing import Optional
from uuid import uuid4

from pocket_ledger.audit import AuditLogger
from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import Profile
from pocket_ledger.services.storage import (
    NotFoundError,
    ProfileIndexStorageInterface,
    StorageError,
)


class ProfileRegistry:
    """
    The set of user profiles.

    Usage:
        registry = ProfileRegistry(FlatFileProfileStorage(settings))
        profile = registry.create_profile("Alice")
        registry.rename_profile(profile.id, "Alice B")
        registry.delete_profile(profile.id)
    """

    def __init__(
        self,
        storage: ProfileIndexStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._profiles: list[Profile] = []
        self.load()

    def load(self) -> None:
        """(Re)read the index. A missing or unreadable index means no profiles."""
        try:
            self._profiles = self._storage.load_profiles()
        except NotFoundError:
            self._profiles = []
        except StorageError as e:
            self._audit.log_persistence_failed(None, e)
            self._profiles = []

    def _persist(self) -> None:
        try:
            self._storage.save_profiles(self._profiles)
        except StorageError as e:
            self._audit.log_persistence_failed(None, e)

    def list_profiles(self) -> list[Profile]:
        """Profiles in persisted order."""
        return [profile.model_copy() for profile in self._profiles]

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        for profile in self._profiles:
            if profile.id == profile_id:
                return profile.model_copy()
        return None

    def profile_folder(self, profile_id: str) -> Path:
        """
        Folder holding the profile's files.

        Raises:
            NotFoundError: If the id cannot name a folder
        """
        return self._storage.profile_folder(profile_id)

    def create_profile(self, name: str) -> Profile:
        """
        Create a profile with a fresh id and an empty folder.

        The name is stored as given.
        """
        profile = Profile(id=str(uuid4()), name=name)
        self._profiles.append(profile)

        try:
            self._storage.create_profile_folder(profile.id)
        except StorageError as e:
            self._audit.log_persistence_failed(profile.id, e)

        self._persist()
        self._audit.log(AuditEventBuilder.profile_created(profile.id, name))
        return profile.model_copy()

    def rename_profile(self, profile_id: str, new_name: str) -> Optional[Profile]:
        """
        Change a profile's display name.

        Returns:
            The renamed profile, or None if no such profile exists
        """
        for index, profile in enumerate(self._profiles):
            if profile.id == profile_id:
                renamed = profile.model_copy(update={"name": new_name})
                self._profiles[index] = renamed
                self._persist()
                self._audit.log(AuditEventBuilder.profile_renamed(
                    profile_id, profile.name, new_name
                ))
                return renamed.model_copy()

        self._audit.log_target_not_found(None, "profile", profile_id, "rename_profile")
        return None

    def delete_profile(self, profile_id: str) -> bool:
        """
        Remove a profile and its folder.

        Returns:
            True if the profile existed
        """
        profile = next((p for p in self._profiles if p.id == profile_id), None)
        if profile is None:
            self._audit.log_target_not_found(None, "profile", profile_id, "delete_profile")
            return False

        self._profiles = [p for p in self._profiles if p.id != profile_id]

        try:
            self._storage.remove_profile_folder(profile_id)
        except StorageError as e:
            self._audit.log_persistence_failed(profile_id, e)

        self._persist()
        self._audit.log(AuditEventBuilder.profile_deleted(profile_id, profile.name))
        return True

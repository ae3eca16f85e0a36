"""Typed persistence for UserProfile records"""
import logging
from typing import Dict, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from src.exceptions import CorruptRecordError
from src.models.profile import UserProfile
from src.storage.local_store import LocalStore, user_key

logger = logging.getLogger(__name__)

PROFILE_KEY = "profile"


class ProfileStore(Protocol):
    """Where a user's progression lives between sessions"""

    async def load(self, user_id: str) -> Optional[UserProfile]:
        """Stored profile, or None when there is nothing usable"""
        ...

    async def save(self, user_id: str, profile: UserProfile) -> None:
        """Overwrite the stored profile; raises StorageError on failure"""
        ...


class LocalProfileStore:
    """ProfileStore on top of LocalStore, under user_<id>_profile"""

    def __init__(self, store: LocalStore):
        self.store = store

    async def load(self, user_id: str) -> Optional[UserProfile]:
        """
        Load a profile

        Corrupt or invalid records are treated as missing so the user starts
        fresh instead of being locked out. Read failures still raise.
        """
        key = user_key(user_id, PROFILE_KEY)
        try:
            record = await self.store.get(key)
        except CorruptRecordError:
            logger.warning(f"[STORE] Profile for user {user_id} is not valid JSON, starting fresh")
            return None

        if record is None:
            return None

        try:
            return UserProfile.model_validate(record)
        except PydanticValidationError as e:
            logger.warning(
                f"[STORE] Profile for user {user_id} failed validation, starting fresh: "
                f"{e.error_count()} error(s)"
            )
            return None

    async def save(self, user_id: str, profile: UserProfile) -> None:
        await self.store.set(user_key(user_id, PROFILE_KEY), profile.to_record())


class InMemoryProfileStore:
    """ProfileStore kept in a dict (tests, throwaway sessions)"""

    def __init__(self):
        self._records: Dict[str, dict] = {}

    async def load(self, user_id: str) -> Optional[UserProfile]:
        record = self._records.get(user_id)
        if record is None:
            return None
        return UserProfile.model_validate(record)

    async def save(self, user_id: str, profile: UserProfile) -> None:
        self._records[user_id] = profile.to_record()

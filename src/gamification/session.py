"""
Progression Session

Owns one signed-in user's progression state: the in-memory profile, the
store it is persisted to and the feedback emitter it reports to. Every XP
award in the app goes through ProgressionSession.award().

Usage:
    session = await ProgressionSession.open(user_id, store, emitter)
    outcome = await session.award(30, x=120, y=340, source="habit")
    if outcome.leveled_up:
        ...
"""

import asyncio
import logging
from collections import deque
from typing import Deque, List, Optional, Union

from src.config import XP_GROWTH_FACTOR
from src.exceptions import StorageError
from src.gamification.feedback import FeedbackEmitter
from src.gamification.xp_system import apply_xp, default_profile, get_xp_for_activity, validate_amount
from src.models.profile import AwardOutcome, UserProfile
from src.storage.profile_store import ProfileStore

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


class ProgressionSession:
    """
    Per-user progression state with serialized awards

    Awards are applied one at a time under a lock: compute the next profile,
    swap it in, persist it, then show feedback. A failed write keeps the
    in-memory update for the rest of the session.
    """

    def __init__(
        self,
        user_id: str,
        profile: UserProfile,
        store: ProfileStore,
        emitter: Optional[FeedbackEmitter] = None,
        growth_factor: float = XP_GROWTH_FACTOR,
    ):
        self.user_id = user_id
        self._profile = profile
        self.store = store
        self.emitter = emitter
        self.growth_factor = growth_factor
        self.history: Deque[AwardOutcome] = deque(maxlen=HISTORY_LIMIT)
        self._lock = asyncio.Lock()

    @classmethod
    async def open(
        cls,
        user_id: str,
        store: ProfileStore,
        emitter: Optional[FeedbackEmitter] = None,
        growth_factor: float = XP_GROWTH_FACTOR,
    ) -> "ProgressionSession":
        """
        Load the user's profile, creating the default one if none is stored

        Raises:
            StorageError: the store could not be read at all
        """
        profile = await store.load(user_id)
        if profile is None:
            profile = default_profile()
            logger.info(f"Creating default progression profile for user {user_id}")
            try:
                await store.save(user_id, profile)
            except StorageError:
                logger.warning(f"[XP] Could not persist default profile for user {user_id}; continuing in memory")

        return cls(user_id, profile, store, emitter, growth_factor)

    @property
    def profile(self) -> UserProfile:
        return self._profile

    async def award(
        self,
        amount: Union[int, float],
        x: Optional[float] = None,
        y: Optional[float] = None,
        source: str = "manual",
    ) -> AwardOutcome:
        """
        Award XP to the user

        Args:
            amount: Non-negative XP; 0 changes nothing and is not saved
            x, y: Where the popup should appear (defaults to screen center)
            source: Activity that earned the XP, for logs and history

        Returns:
            AwardOutcome with the new profile and levels gained

        Raises:
            ValidationError: amount is negative, infinite or not a number
        """
        amount = validate_amount(amount)
        async with self._lock:
            previous = self._profile
            updated, levels_gained = apply_xp(previous, amount, self.growth_factor)
            self._profile = updated

            persisted = True
            if amount:
                try:
                    await self.store.save(self.user_id, updated)
                except StorageError as e:
                    persisted = False
                    logger.warning(
                        f"[XP] Profile write failed for user {self.user_id} "
                        f"(request {e.request_id}); keeping in-memory progress"
                    )

            popup = None
            if self.emitter is not None:
                try:
                    popup = self.emitter.emit(amount, levels_gained, x, y)
                except Exception as e:
                    logger.warning(f"[FEEDBACK] Feedback failed for user {self.user_id}: {type(e).__name__}: {e}")

            outcome = AwardOutcome(
                amount=amount,
                source=source,
                previous=previous,
                profile=updated,
                levels_gained=levels_gained,
                popup=popup,
                persisted=persisted,
            )
            self.history.append(outcome)

        logger.info(
            f"Awarded {amount} XP to user {self.user_id} for {source}. "
            f"Level: {updated.level}, Points: {updated.points}/{updated.xp_to_next_level}"
        )
        if levels_gained:
            logger.info(f"User {self.user_id} leveled up from {previous.level} to {updated.level}!")

        return outcome

    async def award_activity(
        self,
        activity_type: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> AwardOutcome:
        """Award the canonical XP for an activity (habit, rpd, exposure, chat, daily_consult)"""
        return await self.award(get_xp_for_activity(activity_type), x, y, source=activity_type)

    def recent_awards(self, limit: int = 10) -> List[AwardOutcome]:
        """Newest first"""
        return list(reversed(self.history))[:limit]

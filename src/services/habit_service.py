"""
HabitService - Daily habit check-ins

Checking a habit in earns XP; unchecking it does not (and does not take
XP back).
"""

import logging
from typing import Optional

from src.exceptions import ValidationError
from src.gamification.session import ProgressionSession
from src.models.profile import AwardOutcome
from src.models.tracking import HabitStatus
from src.storage.local_store import LocalStore, user_key

logger = logging.getLogger(__name__)

HABITS_KEY = "habits"


class HabitService:
    """Service for the habit tracker"""

    def __init__(self, store: LocalStore, session: ProgressionSession):
        self.store = store
        self.session = session

    @property
    def _key(self) -> str:
        return user_key(self.session.user_id, HABITS_KEY)

    async def get_status(self) -> HabitStatus:
        data = await self.store.get(self._key)
        return HabitStatus.model_validate(data) if data else HabitStatus()

    async def toggle(
        self,
        habit: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> tuple[HabitStatus, Optional[AwardOutcome]]:
        """
        Flip one habit

        Args:
            habit: HabitStatus field name (sleep, hydration, ...)
            x, y: Where the tap happened, for the XP popup

        Returns:
            (new status, award outcome or None when the habit was unchecked)

        Raises:
            ValidationError: unknown habit
        """
        if habit not in HabitStatus.model_fields:
            raise ValidationError(f"Unknown habit: {habit}", field="habit", value=habit)

        status = await self.get_status()
        becoming_active = not getattr(status, habit)
        status = status.model_copy(update={habit: becoming_active})
        await self.store.set(self._key, status.model_dump())

        logger.info(f"User {self.session.user_id} set habit {habit} to {becoming_active}")

        if not becoming_active:
            return status, None

        outcome = await self.session.award_activity("habit", x, y)
        return status, outcome

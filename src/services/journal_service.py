"""
JournalService - Thought records (RPD) and the daily reflection

Filing a thought record earns XP. The reflection (gratitude plus three
wins) is saved as typed and earns nothing.
"""

import logging
from typing import List, Optional

from src.gamification.session import ProgressionSession
from src.models.profile import AwardOutcome
from src.models.tracking import DailyReflection, RPDRecord
from src.storage.local_store import LocalStore, user_key

logger = logging.getLogger(__name__)

RPDS_KEY = "rpds"
REFLECTION_KEY = "reflection"


class JournalService:
    """Service for cognitive journaling"""

    def __init__(self, store: LocalStore, session: ProgressionSession):
        self.store = store
        self.session = session

    async def list_records(self) -> List[RPDRecord]:
        """Thought records, newest first"""
        data = await self.store.get(user_key(self.session.user_id, RPDS_KEY), default=[])
        return [RPDRecord.model_validate(item) for item in data]

    async def file_record(
        self,
        record: RPDRecord,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> AwardOutcome:
        """Archive a completed thought record and award XP for it"""
        records = [record] + await self.list_records()
        await self.store.set(
            user_key(self.session.user_id, RPDS_KEY),
            [r.model_dump(mode="json") for r in records],
        )
        logger.info(
            f"User {self.session.user_id} filed thought record {record.id} "
            f"(distortion={record.distortion.value if record.distortion else None})"
        )
        return await self.session.award_activity("rpd", x, y)

    async def get_reflection(self) -> DailyReflection:
        data = await self.store.get(user_key(self.session.user_id, REFLECTION_KEY))
        return DailyReflection.model_validate(data) if data else DailyReflection()

    async def save_reflection(self, reflection: DailyReflection) -> None:
        await self.store.set(user_key(self.session.user_id, REFLECTION_KEY), reflection.model_dump())

"""
ChatService - Conversations with the assistant

A chat message earns XP only once a reply has come back. Opening the daily
consult prompt earns the daily consult bonus.
"""

import logging
from typing import Optional

from src.agent.therapist import GeminiTherapist, ThoughtAnalysis
from src.gamification.session import ProgressionSession
from src.models.profile import AwardOutcome

logger = logging.getLogger(__name__)


class ChatService:
    """Service wrapping the hosted model for one user"""

    def __init__(self, therapist: GeminiTherapist, session: ProgressionSession):
        self.therapist = therapist
        self.session = session

    async def send(
        self,
        message: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> tuple[str, AwardOutcome]:
        """
        Send a message and award chat XP for the reply

        Raises:
            ChatAPIError: the model call failed (no XP is awarded)
            ConfigurationError: no API key configured
        """
        reply = await self.therapist.chat(message)
        outcome = await self.session.award_activity("chat", x, y)
        return reply, outcome

    async def analyze_thought(self, thought: str) -> Optional[ThoughtAnalysis]:
        """Distortion feedback for the thought-record form; earns nothing"""
        return await self.therapist.analyze_thought(thought)

    async def open_daily_consult(
        self,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> AwardOutcome:
        logger.info(f"User {self.session.user_id} opened the daily consult")
        return await self.session.award_activity("daily_consult", x, y)

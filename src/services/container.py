"""
Service Container - Dependency Injection Container

Holds one signed-in user's infrastructure (store, progression session,
therapist client) and lazily builds the services on top of it.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from src.agent.therapist import GeminiTherapist
from src.gamification.feedback import FeedbackEmitter
from src.gamification.session import ProgressionSession
from src.storage.local_store import LocalStore
from src.storage.profile_store import LocalProfileStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Per-session dependency container.

    Services are lazy-loaded on first access via properties.
    """

    # Infrastructure dependencies (injected)
    store: LocalStore
    session: ProgressionSession
    therapist: Optional[GeminiTherapist] = None

    # Services (lazy-loaded via properties)
    _habit_service: Optional[object] = field(default=None, init=False, repr=False)
    _journal_service: Optional[object] = field(default=None, init=False, repr=False)
    _exposure_service: Optional[object] = field(default=None, init=False, repr=False)
    _chat_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def habit_service(self):
        """Get HabitService instance (lazy-loaded)"""
        if self._habit_service is None:
            from src.services.habit_service import HabitService
            self._habit_service = HabitService(self.store, self.session)
            logger.debug("HabitService instantiated")
        return self._habit_service

    @property
    def journal_service(self):
        """Get JournalService instance (lazy-loaded)"""
        if self._journal_service is None:
            from src.services.journal_service import JournalService
            self._journal_service = JournalService(self.store, self.session)
            logger.debug("JournalService instantiated")
        return self._journal_service

    @property
    def exposure_service(self):
        """Get ExposureService instance (lazy-loaded)"""
        if self._exposure_service is None:
            from src.services.exposure_service import ExposureService
            self._exposure_service = ExposureService(self.store, self.session)
            logger.debug("ExposureService instantiated")
        return self._exposure_service

    @property
    def chat_service(self):
        """Get ChatService instance (lazy-loaded)"""
        if self._chat_service is None:
            from src.services.chat_service import ChatService
            self._chat_service = ChatService(self.therapist or GeminiTherapist(), self.session)
            logger.debug("ChatService instantiated")
        return self._chat_service


async def open_container(
    user_id: str,
    store: LocalStore,
    emitter: Optional[FeedbackEmitter] = None,
    therapist: Optional[GeminiTherapist] = None,
) -> ServiceContainer:
    """
    Open a progression session for a user and wrap it in a container.

    Args:
        user_id: Signed-in user's id
        store: Local key-value store shared by all services
        emitter: Feedback emitter (None for headless use)
        therapist: Optional preconfigured model client

    Returns:
        ServiceContainer: ready to use
    """
    session = await ProgressionSession.open(user_id, LocalProfileStore(store), emitter)
    logger.info(f"Service container opened for user {user_id}")
    return ServiceContainer(store=store, session=session, therapist=therapist)

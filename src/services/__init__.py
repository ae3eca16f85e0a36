"""
Service Layer Package

Business logic for each part of the app. Every service that completes a
user action reports it to the user's ProgressionSession.

- UserService: local accounts and current session
- HabitService: habit check-ins
- JournalService: thought records and daily reflection
- ExposureService: exposure ladder
- ChatService: assistant chat and daily consult
"""

from src.services.container import ServiceContainer, open_container
from src.services.user_service import UserService
from src.services.habit_service import HabitService
from src.services.journal_service import JournalService
from src.services.exposure_service import ExposureService
from src.services.chat_service import ChatService

__all__ = [
    "ServiceContainer",
    "open_container",
    "UserService",
    "HabitService",
    "JournalService",
    "ExposureService",
    "ChatService",
]

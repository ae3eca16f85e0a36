"""
Gamification system for LivreMente

Turns self-care actions into progression:
- XP and leveling engine (geometric thresholds, multi-level awards)
- Per-user progression session with persisted profile
- Ephemeral feedback: XP popups, level-up celebration, achievement tone
"""

from src.gamification.xp_system import (
    ACTIVITY_XP,
    apply_xp,
    default_profile,
    get_xp_for_activity,
    progress_percent,
    total_xp_earned,
)
from src.gamification.feedback import FeedbackEmitter, FeedbackEvent, AsyncioScheduler, ManualScheduler
from src.gamification.session import ProgressionSession

__all__ = [
    "ACTIVITY_XP",
    "apply_xp",
    "default_profile",
    "get_xp_for_activity",
    "progress_percent",
    "total_xp_earned",
    "FeedbackEmitter",
    "FeedbackEvent",
    "AsyncioScheduler",
    "ManualScheduler",
    "ProgressionSession",
]

"""Hosted language model integration (chat and thought analysis)"""

from src.agent.therapist import GeminiTherapist, ThoughtAnalysis, SYSTEM_PROMPT

__all__ = [
    "GeminiTherapist",
    "ThoughtAnalysis",
    "SYSTEM_PROMPT",
]

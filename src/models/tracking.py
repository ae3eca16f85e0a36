"""Self-tracking models: habits, thought records, exposure steps"""
from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class HabitStatus(BaseModel):
    """Daily habit check-ins"""
    sleep: bool = False
    nutrition: bool = False
    exercise: bool = False
    mindfulness: bool = False
    natural_light: bool = False
    hydration: bool = False


class CognitiveDistortion(str, Enum):
    """Distortions offered by the thought-record form"""
    CATASTROPHIZING = "catastrophizing"
    MIND_READING = "mind_reading"
    OVERGENERALIZATION = "overgeneralization"
    DISQUALIFYING_POSITIVE = "disqualifying_positive"
    EMOTIONAL_REASONING = "emotional_reasoning"
    ALL_OR_NOTHING = "all_or_nothing"
    SHOULD_STATEMENTS = "should_statements"


class RPDRecord(BaseModel):
    """Dysfunctional thought record (RPD) entry"""
    id: str
    date: datetime = Field(default_factory=datetime.now)
    situation: str = Field(..., min_length=1)
    automatic_thought: str = Field(..., min_length=1)
    distortion: Optional[CognitiveDistortion] = None
    emotion: str = ""
    intensity: int = Field(default=50, ge=0, le=100)  # percent
    rational_response: str = ""
    outcome: str = ""


class DailyReflection(BaseModel):
    """Gratitude note plus three small wins of the day"""
    gratitude: str = ""
    victory1: str = ""
    victory2: str = ""
    victory3: str = ""


class ExposureStep(BaseModel):
    """One rung of the exposure ladder, rated in SUDS (0-100)"""
    id: str
    behavior: str
    rating: int = Field(default=50, ge=0, le=100)
    completed: bool = False

    @field_validator('behavior')
    @classmethod
    def behavior_not_blank(cls, v: str) -> str:
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("Behavior cannot be empty")
        return trimmed

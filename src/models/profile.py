"""Progression-related Pydantic models"""
import math
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.config import INITIAL_XP_TO_NEXT_LEVEL


class UserProfile(BaseModel):
    """
    Per-user progression state

    Persisted as JSON with the keys points, level, xpToNextLevel and badges.
    """
    model_config = ConfigDict(populate_by_name=True)

    points: Union[int, float] = 0  # XP inside the current level; fractions carry over
    level: int = Field(default=1, ge=1)
    xp_to_next_level: int = Field(default=INITIAL_XP_TO_NEXT_LEVEL, gt=0, alias="xpToNextLevel")
    badges: list[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def points_below_threshold(self) -> 'UserProfile':
        """A stored profile never holds a full level's worth of points"""
        if not math.isfinite(self.points) or self.points < 0:
            raise ValueError(f"points must be a finite non-negative number, got {self.points}")
        if self.points >= self.xp_to_next_level:
            raise ValueError(
                f"points ({self.points}) must be below xpToNextLevel ({self.xp_to_next_level})"
            )
        return self

    def to_record(self) -> dict:
        """Serialize to the persisted record shape"""
        return self.model_dump(by_alias=True)


class XpAward(BaseModel):
    """Floating "+N XP" popup; lives for a fixed display window"""
    id: str
    amount: Union[int, float]
    x: float
    y: float
    created_at: float  # scheduler clock, seconds


class AwardOutcome(BaseModel):
    """Result of one award applied through a ProgressionSession"""
    amount: Union[int, float]
    source: str = "manual"
    previous: UserProfile
    profile: UserProfile
    levels_gained: int = 0
    popup: Optional[XpAward] = None
    persisted: bool = True

    @property
    def leveled_up(self) -> bool:
        return self.levels_gained > 0

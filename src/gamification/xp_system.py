"""
XP and Leveling System

Converts raw XP awards into level/points state.

Leveling Curve:
- Level 1 needs 500 XP
- Each level-up multiplies the threshold by XP_GROWTH_FACTOR (1.3), floored
- Points carry over: 480 XP + 30 XP at level 1 -> level 2 with 10 XP toward 650
- Fractional awards are kept as-is; 480 + 20.5 -> level 2 with 0.5 XP

XP Award Rules:
- Habit checked in: 30 XP (unchecking gives nothing)
- Thought record (RPD) filed: 100 XP
- Exposure step validated: 75 XP
- Chat message answered: 5 XP
- Daily consult opened: 200 XP
"""

import logging
import math
from typing import Dict, Tuple, Union

from src.config import INITIAL_XP_TO_NEXT_LEVEL, XP_GROWTH_FACTOR
from src.exceptions import ValidationError
from src.models.profile import UserProfile

logger = logging.getLogger(__name__)


ACTIVITY_XP: Dict[str, int] = {
    "habit": 30,
    "rpd": 100,
    "exposure": 75,
    "chat": 5,
    "daily_consult": 200,
}


def validate_amount(amount) -> Union[int, float]:
    """Reject anything that is not a finite, non-negative number of XP"""
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValidationError("XP amount must be a number", field="amount", value=amount)
    if isinstance(amount, float):
        if not math.isfinite(amount):
            raise ValidationError("XP amount must be finite", field="amount", value=amount)
        if amount.is_integer():
            amount = int(amount)
    if amount < 0:
        raise ValidationError("XP amount must be non-negative", field="amount", value=amount)
    return amount


def default_profile() -> UserProfile:
    """Profile given to a user on first sign-in"""
    return UserProfile(xp_to_next_level=INITIAL_XP_TO_NEXT_LEVEL)


def next_threshold(threshold: int, growth_factor: float = XP_GROWTH_FACTOR) -> int:
    """XP needed for the level after the one whose threshold is given"""
    grown = math.floor(threshold * growth_factor)
    # floor() can stall tiny thresholds (e.g. 1 * 1.3 -> 1)
    return max(grown, threshold + 1)


def apply_xp(
    profile: UserProfile,
    amount: Union[int, float],
    growth_factor: float = XP_GROWTH_FACTOR
) -> Tuple[UserProfile, int]:
    """
    Apply an XP award to a profile

    Args:
        profile: Current progression state (not modified)
        amount: Non-negative XP to add (fractions allowed)
        growth_factor: Threshold multiplier per level, must be > 1

    Returns:
        (new_profile, levels_gained)

    Raises:
        ValidationError: amount is negative, infinite or not a number
    """
    amount = validate_amount(amount)
    if growth_factor <= 1:
        raise ValidationError("Growth factor must be greater than 1", field="growth_factor", value=growth_factor)

    points = profile.points + amount
    level = profile.level
    threshold = profile.xp_to_next_level
    levels_gained = 0

    # One iteration per level crossed; thresholds grow geometrically
    while points >= threshold:
        points -= threshold
        level += 1
        threshold = next_threshold(threshold, growth_factor)
        levels_gained += 1

    updated = profile.model_copy(update={
        "points": points,
        "level": level,
        "xp_to_next_level": threshold,
    })

    if levels_gained:
        logger.debug(
            f"[XP] +{amount} XP crossed {levels_gained} level(s): "
            f"{profile.level} -> {level}, next threshold {threshold}"
        )

    return updated, levels_gained


def total_xp_earned(profile: UserProfile, growth_factor: float = XP_GROWTH_FACTOR) -> Union[int, float]:
    """Lifetime XP implied by a profile that started from default_profile()"""
    total = profile.points
    threshold = default_profile().xp_to_next_level
    for _ in range(profile.level - 1):
        total += threshold
        threshold = next_threshold(threshold, growth_factor)
    return total


def progress_percent(profile: UserProfile) -> float:
    """How full the progress bar is, 0-100"""
    return profile.points / profile.xp_to_next_level * 100


def get_xp_for_activity(activity_type: str) -> int:
    """
    XP granted for completing an activity

    Args:
        activity_type: One of ACTIVITY_XP's keys

    Returns:
        XP amount to award

    Raises:
        ValidationError: unknown activity
    """
    try:
        return ACTIVITY_XP[activity_type]
    except KeyError:
        raise ValidationError(
            f"Unknown activity type: {activity_type}",
            field="activity_type",
            value=activity_type
        ) from None

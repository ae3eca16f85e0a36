"""Unit tests for progression and tracking models"""
import pytest
from pydantic import ValidationError

from src.models.profile import AwardOutcome, UserProfile
from src.models.tracking import ExposureStep, RPDRecord


def test_profile_defaults():
    profile = UserProfile()

    assert profile.to_record() == {"points": 0, "level": 1, "xpToNextLevel": 500, "badges": []}


def test_profile_accepts_both_field_names():
    assert UserProfile(xpToNextLevel=650) == UserProfile(xp_to_next_level=650)


def test_profile_record_round_trip():
    profile = UserProfile(points=12, level=7, xp_to_next_level=2413, badges=["a", "b"])

    assert UserProfile.model_validate(profile.to_record()) == profile


def test_profile_rejects_points_at_threshold():
    with pytest.raises(ValidationError):
        UserProfile(points=500, xp_to_next_level=500)


def test_profile_keeps_fractional_points():
    record = {"points": 0.5, "level": 2, "xpToNextLevel": 650, "badges": []}

    profile = UserProfile.model_validate(record)

    assert profile.points == 0.5
    assert profile.to_record() == record


@pytest.mark.parametrize("points", [-0.5, float("nan"), float("inf")])
def test_profile_rejects_bad_points(points):
    with pytest.raises(ValidationError):
        UserProfile(points=points)


def test_award_outcome_leveled_up():
    base = UserProfile()
    assert AwardOutcome(amount=0, previous=base, profile=base).leveled_up is False
    assert AwardOutcome(amount=500, previous=base, profile=base, levels_gained=1).leveled_up is True


@pytest.mark.parametrize("rating", [-1, 101])
def test_exposure_rating_is_suds(rating):
    with pytest.raises(ValidationError):
        ExposureStep(id="1", behavior="Ride the bus", rating=rating)


def test_rpd_requires_thought():
    with pytest.raises(ValidationError):
        RPDRecord(id="1", situation="Meeting", automatic_thought="")

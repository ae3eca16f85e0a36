"""Global test fixtures and utilities for livremente tests"""
import pytest
from unittest.mock import Mock
from pathlib import Path
import tempfile

from src.gamification.feedback import FeedbackEmitter, ManualScheduler
from src.gamification.session import ProgressionSession
from src.gamification.sound import TonePlayer
from src.models.profile import UserProfile
from src.storage.local_store import LocalStore
from src.storage.profile_store import InMemoryProfileStore


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "1712345678901"


@pytest.fixture
def near_level_up_profile():
    """Profile 20 XP short of level 2"""
    return UserProfile(points=480, level=1, xp_to_next_level=500)


# ============================================================================
# File & Directory Fixtures
# ============================================================================

@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test data"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def local_store(temp_data_dir):
    """LocalStore rooted in a throwaway directory"""
    return LocalStore(temp_data_dir)


@pytest.fixture
def profile_store():
    """In-memory profile store"""
    return InMemoryProfileStore()


# ============================================================================
# Feedback Fixtures
# ============================================================================

@pytest.fixture
def scheduler():
    """Hand-driven clock for popup and level-up timers"""
    return ManualScheduler()


@pytest.fixture
def tone_output():
    """Records tones instead of playing them"""
    return Mock()


@pytest.fixture
def emitter(scheduler, tone_output):
    """FeedbackEmitter on the manual clock with canonical timings"""
    return FeedbackEmitter(
        scheduler=scheduler,
        tone_player=TonePlayer(output=tone_output, enabled=True),
        popup_duration_ms=1200,
        gaining_flash_ms=600,
        level_up_duration_ms=3000,
        major_threshold=100,
    )


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
async def session(test_user_id, profile_store, emitter):
    """Fresh progression session backed by the in-memory store"""
    return await ProgressionSession.open(test_user_id, profile_store, emitter)


@pytest.fixture
async def disk_session(test_user_id, local_store, emitter):
    """Progression session persisted to the temp directory"""
    from src.storage.profile_store import LocalProfileStore
    return await ProgressionSession.open(test_user_id, LocalProfileStore(local_store), emitter)

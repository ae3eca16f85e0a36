"""Unit tests for local persistence (src/storage/)"""
import json

import pytest

from src.exceptions import CorruptRecordError, StorageError, ValidationError
from src.models.profile import UserProfile
from src.storage.local_store import LocalStore, user_key
from src.storage.profile_store import InMemoryProfileStore, LocalProfileStore


# ============================================================================
# LocalStore
# ============================================================================

def test_user_key_namespacing():
    assert user_key("42", "profile") == "user_42_profile"


@pytest.mark.asyncio
async def test_get_missing_returns_default(local_store):
    assert await local_store.get("nothing") is None
    assert await local_store.get("nothing", default=[]) == []


@pytest.mark.asyncio
async def test_set_get_remove(local_store):
    await local_store.set("theme", "dark")

    assert await local_store.get("theme") == "dark"
    assert await local_store.exists("theme") is True
    assert await local_store.remove("theme") is True
    assert await local_store.remove("theme") is False
    assert await local_store.get("theme") is None


@pytest.mark.asyncio
async def test_set_leaves_no_temp_files(local_store, temp_data_dir):
    await local_store.set("a", {"x": 1})
    await local_store.set("a", {"x": 2})

    assert [p.name for p in temp_data_dir.iterdir()] == ["a.json"]


@pytest.mark.asyncio
async def test_unsafe_key_rejected(local_store, temp_data_dir):
    for key in ["../escape/key", "a/b", ".hidden", ""]:
        with pytest.raises(ValidationError):
            await local_store.set(key, 1)

    assert list(temp_data_dir.iterdir()) == []


def test_user_key_rejects_ids_that_could_collide():
    for user_id in ["a/b", "a_b", "..", ""]:
        with pytest.raises(ValidationError) as exc_info:
            user_key(user_id, "profile")
        assert exc_info.value.field == "user_id"


@pytest.mark.asyncio
async def test_corrupt_json_raises(local_store):
    local_store.data_path.mkdir(parents=True, exist_ok=True)
    local_store.path_for("broken").write_text("{not json", encoding="utf-8")

    with pytest.raises(CorruptRecordError) as exc_info:
        await local_store.get("broken")

    assert exc_info.value.key == "broken"


@pytest.mark.asyncio
async def test_unwritable_directory_raises_storage_error(temp_data_dir):
    blocker = temp_data_dir / "blocker"
    blocker.write_text("not a directory")
    store = LocalStore(blocker / "data")

    with pytest.raises(StorageError):
        await store.set("k", 1)


# ============================================================================
# Profile stores
# ============================================================================

@pytest.mark.asyncio
async def test_profile_record_uses_camel_case(local_store, test_user_id):
    profiles = LocalProfileStore(local_store)
    profile = UserProfile(points=10, level=2, xp_to_next_level=650, badges=["first_step"])

    await profiles.save(test_user_id, profile)

    raw = json.loads(local_store.path_for(f"user_{test_user_id}_profile").read_text())
    assert raw == {"points": 10, "level": 2, "xpToNextLevel": 650, "badges": ["first_step"]}


@pytest.mark.asyncio
async def test_profile_round_trip(local_store, test_user_id):
    profiles = LocalProfileStore(local_store)
    profile = UserProfile(points=530, level=3, xp_to_next_level=845)

    await profiles.save(test_user_id, profile)

    assert await profiles.load(test_user_id) == profile


@pytest.mark.asyncio
async def test_profile_missing_is_none(local_store):
    assert await LocalProfileStore(local_store).load("nobody") is None


@pytest.mark.asyncio
async def test_corrupt_profile_falls_back_to_none(local_store, test_user_id):
    local_store.data_path.mkdir(parents=True, exist_ok=True)
    local_store.path_for(f"user_{test_user_id}_profile").write_text("{\"points\": 1", encoding="utf-8")

    assert await LocalProfileStore(local_store).load(test_user_id) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("record", [
    {"points": 700, "level": 1, "xpToNextLevel": 500, "badges": []},
    {"points": -1, "level": 1, "xpToNextLevel": 500, "badges": []},
    {"points": 0, "level": 0, "xpToNextLevel": 500, "badges": []},
    {"points": 0, "level": 1, "xpToNextLevel": 0, "badges": []},
    ["not", "a", "profile"],
])
async def test_invalid_profile_falls_back_to_none(local_store, test_user_id, record):
    await local_store.set(f"user_{test_user_id}_profile", record)

    assert await LocalProfileStore(local_store).load(test_user_id) is None


@pytest.mark.asyncio
async def test_in_memory_store_round_trip(test_user_id):
    store = InMemoryProfileStore()
    profile = UserProfile(points=5)

    await store.save(test_user_id, profile)

    assert await store.load(test_user_id) == profile
    assert await store.load("other") is None


@pytest.mark.asyncio
async def test_disk_session_reopens_with_same_progress(disk_session, local_store, test_user_id):
    from src.gamification.session import ProgressionSession

    await disk_session.award(1200)
    reopened = await ProgressionSession.open(test_user_id, LocalProfileStore(local_store))

    assert reopened.profile == disk_session.profile

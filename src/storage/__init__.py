"""Local, user-namespaced persistence"""

from src.storage.local_store import LocalStore, user_key
from src.storage.profile_store import ProfileStore, LocalProfileStore, InMemoryProfileStore

__all__ = [
    "LocalStore",
    "user_key",
    "ProfileStore",
    "LocalProfileStore",
    "InMemoryProfileStore",
]

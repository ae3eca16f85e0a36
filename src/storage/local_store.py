"""Local key-value storage for user data

One JSON file per key under DATA_PATH, the on-disk equivalent of browser
local storage. Per-user keys are namespaced as user_<id>_<name>.
"""
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional

from src.config import DATA_PATH
from src.exceptions import ValidationError, wrap_external_exception

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]*")
_SAFE_USER_ID = re.compile(r"[A-Za-z0-9-]+")


def user_key(user_id: str, name: str) -> str:
    """
    Namespaced key for one user's record, e.g. user_42_profile

    Raises:
        ValidationError: user_id is empty or holds anything but letters, digits and dashes
    """
    if not _SAFE_USER_ID.fullmatch(str(user_id)):
        raise ValidationError(f"Invalid user id: {user_id!r}", field="user_id", value=user_id)
    return f"user_{user_id}_{name}"


class LocalStore:
    """JSON file store keyed by string"""

    def __init__(self, data_path: Path = DATA_PATH):
        self.data_path = Path(data_path)

    def path_for(self, key: str) -> Path:
        """
        File backing a key

        Raises:
            ValidationError: key would not map to a single file inside data_path
        """
        if not _SAFE_KEY.fullmatch(key):
            raise ValidationError(f"Invalid storage key: {key!r}", field="key", value=key)
        return self.data_path / f"{key}.json"

    async def get(self, key: str, default: Any = None) -> Any:
        """
        Read a key

        Returns:
            Decoded JSON value, or default when the key is absent

        Raises:
            CorruptRecordError: file exists but is not valid JSON
            StorageError: file could not be read
        """
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise wrap_external_exception(e, operation="store_get", context={"key": key})

    async def set(self, key: str, value: Any) -> None:
        """
        Overwrite a key with a JSON-serializable value

        The file is written next to its target and renamed into place so a
        failed write never leaves half a record behind.

        Raises:
            StorageError: directory or file could not be written
        """
        path = self.path_for(key)
        tmp_name: Optional[str] = None
        try:
            payload = json.dumps(value, ensure_ascii=False, default=str)
            self.data_path.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_path, prefix=".tmp-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
            tmp_name = None
            logger.debug(f"[STORE] Wrote {key}")
        except OSError as e:
            raise wrap_external_exception(e, operation="store_set", context={"key": key})
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    async def remove(self, key: str) -> bool:
        """Delete a key; returns whether it existed"""
        path = self.path_for(key)
        try:
            path.unlink()
            logger.debug(f"[STORE] Removed {key}")
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise wrap_external_exception(e, operation="store_remove", context={"key": key})

    async def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

"""
Persistent key/value storage for client state.

Tokens, preferences and recent prompts live in one JSON document under
fixed keys, so they survive between CLI invocations until logout.

Keys:
- access_token / refresh_token: the login credential
- user_preferences: generation defaults (language, quality, voice)
- recent_queries: most recent prompts, newest first
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from demo_client.types import UserPreferences

logger = logging.getLogger(__name__)


class StorageKeys:
    """Fixed keys used in the storage document."""

    ACCESS_TOKEN = "access_token"
    REFRESH_TOKEN = "refresh_token"
    USER_PREFERENCES = "user_preferences"
    RECENT_QUERIES = "recent_queries"


MAX_RECENT_QUERIES = 10
FILE_MODE = 0o600


class LocalStorage:
    """
    JSON-file backed key/value store.

    Every write rewrites the whole document; the file is small and only
    touched on login, logout and preference changes.

    Example:
        storage = LocalStorage(Path("~/.demo-client/storage.json").expanduser())
        storage.set_item(StorageKeys.ACCESS_TOKEN, "abc")
        storage.get_item(StorageKeys.ACCESS_TOKEN)  # "abc"
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            # Covers both invalid JSON and bytes that are not UTF-8
            logger.warning("Ignoring unreadable storage file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Holds bearer tokens: owner read/write only
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            # os.open only applies the mode on creation
            self.path.chmod(FILE_MODE)
            f.write(json.dumps(data, indent=2))

    def get_item(self, key: str) -> Any:
        return self._load().get(key)

    def set_item(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


def load_preferences(storage: LocalStorage) -> UserPreferences:
    """Read saved preferences, defaults when none are stored."""
    data = storage.get_item(StorageKeys.USER_PREFERENCES)
    if not isinstance(data, dict):
        return UserPreferences()
    return UserPreferences.from_dict(data)


def save_preferences(storage: LocalStorage, preferences: UserPreferences) -> None:
    storage.set_item(StorageKeys.USER_PREFERENCES, preferences.to_dict())


def recent_queries(storage: LocalStorage) -> list[str]:
    data = storage.get_item(StorageKeys.RECENT_QUERIES)
    if not isinstance(data, list):
        return []
    return [q for q in data if isinstance(q, str)]


def remember_query(storage: LocalStorage, prompt: str) -> list[str]:
    """
    Record a submitted prompt as the most recent one.

    Duplicates move to the front instead of appearing twice, and the
    list is capped at MAX_RECENT_QUERIES.

    Returns:
        The updated list, newest first.
    """
    prompt = prompt.strip()
    queries = [q for q in recent_queries(storage) if q != prompt]
    queries.insert(0, prompt)
    queries = queries[:MAX_RECENT_QUERIES]
    storage.set_item(StorageKeys.RECENT_QUERIES, queries)
    return queries

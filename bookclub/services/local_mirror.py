"""Local mirror: per-session key/value cache of the remote collections.

Values are JSON-encoded into `mirror_entries` rows. The mirror is never
authoritative; adapters read it only when the remote store is unavailable.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from bookclub.db.repositories import mirror_repo
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.local_mirror")

BOOKS_KEY = "bookclub_books"
GUIDES_KEY = "bookclub_guides"
VOTES_KEY = "bookclub_votes"
GENRE_VOTES_KEY = "bookclub_genre_votes"
CURRENT_USER_KEY = "bookclub_user"
GENRE_HISTORY_KEY = "bookclub_genre_history"

STORAGE_KEYS = (
    BOOKS_KEY,
    GUIDES_KEY,
    VOTES_KEY,
    GENRE_VOTES_KEY,
    CURRENT_USER_KEY,
    GENRE_HISTORY_KEY,
)


class LocalMirror:
    """Mirror bound to one session scope."""

    def __init__(self, scope: str):
        if not scope:
            raise ValueError("mirror scope required")
        self.scope = scope

    def __repr__(self) -> str:  # pragma: no cover
        return f"<LocalMirror scope={self.scope}>"

    def read_value(self, key: str, default: Any = None) -> Any:
        raw = mirror_repo.get_value(self.scope, key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            # Older clients stored bare strings (e.g. the user's name).
            return raw

    def write_value(self, key: str, value: Any) -> None:
        mirror_repo.put_value(self.scope, key, json.dumps(value))

    def read_list(self, key: str) -> List[Dict[str, Any]]:
        value = self.read_value(key, [])
        if not isinstance(value, list):
            LOG.warning("Mirror entry is not a list scope=%s key=%s; ignoring", self.scope, key)
            return []
        return [item for item in value if isinstance(item, dict)]

    def write_list(self, key: str, items: List[Dict[str, Any]]) -> None:
        self.write_value(key, list(items))

    def keys(self) -> List[str]:
        return mirror_repo.list_keys(self.scope)

    def clear(self) -> int:
        return mirror_repo.clear_scope(self.scope)


def find_index(items: List[Dict[str, Any]], item_id: Optional[str]) -> int:
    for idx, item in enumerate(items):
        if item.get("id") == item_id:
            return idx
    return -1


__all__ = [
    "LocalMirror",
    "STORAGE_KEYS",
    "BOOKS_KEY",
    "GUIDES_KEY",
    "VOTES_KEY",
    "GENRE_VOTES_KEY",
    "CURRENT_USER_KEY",
    "GENRE_HISTORY_KEY",
    "find_index",
]

"""Identity helpers shared by the profile service and HTTP routes."""
from __future__ import annotations

import uuid
from typing import Any, Optional

from flask import session

MIRROR_SCOPE_KEY = "bookclub_mirror_scope"


def normalize_email(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip().lower()
    return cleaned or None


def get_mirror_scope() -> str:
    """Return the local mirror scope bound to the current browser session.

    A fresh scope id is minted on first use and kept in the signed session
    cookie, so each browser gets its own mirror like browser local storage.
    """
    scope = session.get(MIRROR_SCOPE_KEY)
    if isinstance(scope, str) and scope:
        return scope
    scope = uuid.uuid4().hex
    session[MIRROR_SCOPE_KEY] = scope
    return scope


class PermissionError(Exception):
    pass


__all__ = [
    "MIRROR_SCOPE_KEY",
    "normalize_email",
    "get_mirror_scope",
    "PermissionError",
]

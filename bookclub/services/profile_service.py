"""Session identity & admin checks.

The current user lives in the local mirror. Admin status is evaluated on
every call: master admin address first, then the remote admin list.
"""
from __future__ import annotations

import json
from typing import Any, List

from bookclub import config
from bookclub.db.repositories import mirror_repo
from bookclub.services import sheets_gateway
from bookclub.services.collection_sync import utc_timestamp
from bookclub.services.entities import UserProfile
from bookclub.services.errors import RemoteStoreError
from bookclub.services.local_mirror import CURRENT_USER_KEY, LocalMirror
from bookclub.utils.identity import normalize_email
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.profile")

DEFAULT_USER_NAME = "Book Club Member"


def _decode_user_record(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return None


def get_current_user(mirror: LocalMirror) -> UserProfile:
    """Stored profile, a legacy bare-name record, or the default member."""
    raw = mirror_repo.get_value(mirror.scope, CURRENT_USER_KEY)
    if raw is None:
        return UserProfile(name=DEFAULT_USER_NAME, email="")
    record = _decode_user_record(raw)
    if isinstance(record, dict):
        name = record.get("name") if isinstance(record.get("name"), str) else ""
        email = record.get("email") if isinstance(record.get("email"), str) else ""
        return UserProfile(name=name.strip() or DEFAULT_USER_NAME, email=email.strip())
    # Legacy records hold the bare name, possibly JSON-quoted.
    legacy = record if isinstance(record, str) else raw
    if legacy.strip():
        return UserProfile(name=legacy.strip(), email="")
    return UserProfile(name=DEFAULT_USER_NAME, email="")


def set_current_user(mirror: LocalMirror, profile: UserProfile) -> UserProfile:
    cleaned = UserProfile(name=(profile.name or "").strip(), email=(profile.email or "").strip())
    mirror.write_value(CURRENT_USER_KEY, cleaned.as_dict())
    return cleaned


def sync_profile(profile: UserProfile) -> None:
    """Upsert the profile remotely, keyed by email. Never raises."""
    email = normalize_email(profile.email)
    if not email:
        LOG.debug("Profile sync skipped (no email)")
        return
    row = {"email": email, "name": (profile.name or "").strip(), "last_active": utc_timestamp()}
    try:
        sheets_gateway.call("saveProfile", {"row": row})
    except RemoteStoreError as exc:
        LOG.error("Profile sync rejected email=%s: %s", email, exc.message)


def _admin_email(entry: Any) -> str | None:
    if isinstance(entry, str):
        return normalize_email(entry)
    if isinstance(entry, dict):
        return normalize_email(entry.get("email"))
    return None


def get_admin_emails() -> List[str]:
    try:
        remote = sheets_gateway.call("getAdmins")
    except RemoteStoreError as exc:
        LOG.error("Admin list read rejected: %s", exc.message)
        return []
    if not isinstance(remote, list):
        return []
    emails = []
    for entry in remote:
        email = _admin_email(entry)
        if email:
            emails.append(email)
    return emails


def is_admin(identity: UserProfile) -> bool:
    email = normalize_email(identity.email if identity else None)
    if not email:
        return False
    master = config.master_admin_email()
    if master and email == master:
        return True
    return email in get_admin_emails()


__all__ = [
    "DEFAULT_USER_NAME",
    "get_current_user",
    "set_current_user",
    "sync_profile",
    "get_admin_emails",
    "is_admin",
]

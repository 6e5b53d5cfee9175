"""Shared read/write orchestration between the remote store and the mirror.

Reads prefer the remote store and refresh the mirror from it. Writes are
optimistic: the mirror gets a `pending` entry first, which is confirmed with
the remote-assigned id, rolled back when the remote store rejects it, or left
pending when the remote store is unreachable.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from bookclub.services import sheets_gateway
from bookclub.services.entities import CONFIRMED, PENDING, REJECTED
from bookclub.services.errors import RemoteStoreError
from bookclub.services.local_mirror import LocalMirror, find_index
from bookclub.services.schema import coerce_count
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.collection_sync")

E = TypeVar("E")


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def provisional_id() -> str:
    return uuid.uuid4().hex[:12]


def fetch(
    mirror: LocalMirror,
    key: str,
    action: str,
    entity_cls: Type[E],
    payload: Optional[Dict[str, Any]] = None,
) -> List[E]:
    """Remote rows when reachable, else the mirror's stored sequence."""
    try:
        remote = sheets_gateway.call(action, payload)
    except RemoteStoreError as exc:
        LOG.error("Read rejected by remote store action=%s: %s", action, exc.message)
        return []
    if remote is None:
        LOG.debug("Remote unavailable, serving mirror action=%s key=%s", action, key)
        return [entity_cls.from_dict(item) for item in mirror.read_list(key)]  # type: ignore[attr-defined]
    if not isinstance(remote, list):
        LOG.warning("Unexpected %s response type=%s; treating as empty", action, type(remote).__name__)
        return []
    entities = [entity_cls.from_row(row) for row in remote if isinstance(row, dict)]  # type: ignore[attr-defined]
    mirror.write_list(key, [e.with_status(CONFIRMED).as_dict() for e in entities])  # type: ignore[attr-defined]
    return entities


def append(
    mirror: LocalMirror,
    key: str,
    action: str,
    entity: E,
    *,
    timestamp_field: str,
    prepend: bool = False,
) -> E:
    """Optimistically add `entity` to the mirror and push it to the remote store."""
    entity.validate()  # type: ignore[attr-defined]
    row = entity.to_row()  # type: ignore[attr-defined]
    local_id = provisional_id()
    pending = entity.with_status(PENDING, id=local_id, **{timestamp_field: utc_timestamp()})  # type: ignore[attr-defined]
    items = mirror.read_list(key)
    if prepend:
        items.insert(0, pending.as_dict())
    else:
        items.append(pending.as_dict())
    mirror.write_list(key, items)

    try:
        result = sheets_gateway.call(action, {"row": row})
    except RemoteStoreError as exc:
        LOG.error("Remote store rejected %s; rolling back pending entry id=%s: %s", action, local_id, exc.message)
        _update_entry(mirror, key, local_id, lambda _item: None)
        return pending.with_status(REJECTED)
    if result is None:
        LOG.info("Remote unavailable for %s; entry kept pending id=%s", action, local_id)
        return pending
    remote_id = result.get("id") if isinstance(result, dict) else None
    if remote_id in (None, ""):
        LOG.debug("%s succeeded without an assigned id; entry kept pending id=%s", action, local_id)
        return pending
    confirmed = pending.with_status(CONFIRMED, id=str(remote_id))
    _update_entry(mirror, key, local_id, lambda _item: confirmed.as_dict())
    return confirmed


def remove(mirror: LocalMirror, key: str, action: str, entity_id: str) -> None:
    _call_quietly(action, {"id": entity_id})
    items = [item for item in mirror.read_list(key) if item.get("id") != entity_id]
    mirror.write_list(key, items)


def clear(mirror: LocalMirror, key: str, action: str, replacement: Optional[List[Dict[str, Any]]] = None) -> None:
    _call_quietly(action)
    mirror.write_list(key, replacement or [])


def increment(mirror: LocalMirror, key: str, action: str, entity_id: str, payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Send a vote for `entity_id`; bump the mirrored counter when present."""
    body = {"id": entity_id}
    if payload:
        body.update(payload)
    _call_quietly(action, body)

    def bump(item: Dict[str, Any]) -> Dict[str, Any]:
        return {**item, "votes": coerce_count(item.get("votes")) + 1}

    return _update_entry(mirror, key, entity_id, bump)


def _call_quietly(action: str, payload: Optional[Dict[str, Any]] = None) -> Any:
    try:
        return sheets_gateway.call(action, payload)
    except RemoteStoreError as exc:
        LOG.error("Remote store rejected %s: %s", action, exc.message)
        return None


def _update_entry(
    mirror: LocalMirror,
    key: str,
    entity_id: Optional[str],
    change: Callable[[Dict[str, Any]], Optional[Dict[str, Any]]],
) -> Optional[Dict[str, Any]]:
    items = mirror.read_list(key)
    idx = find_index(items, entity_id)
    if idx == -1:
        return None
    updated = change(items[idx])
    if updated is None:
        del items[idx]
    else:
        items[idx] = updated
    mirror.write_list(key, items)
    return updated


__all__ = ["fetch", "append", "remove", "clear", "increment", "utc_timestamp", "provisional_id"]

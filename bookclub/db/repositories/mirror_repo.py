"""Repository helpers for mirror entries."""
from __future__ import annotations

from typing import List, Optional

from bookclub.db import app_session
from bookclub.db.models import MirrorEntry


def get_value(scope: str, key: str) -> Optional[str]:
    with app_session() as session:
        record = (
            session.query(MirrorEntry)
            .filter(MirrorEntry.scope == scope, MirrorEntry.key == key)
            .one_or_none()
        )
        return record.value if record else None


def put_value(scope: str, key: str, value: str) -> MirrorEntry:
    with app_session() as session:
        record = (
            session.query(MirrorEntry)
            .filter(MirrorEntry.scope == scope, MirrorEntry.key == key)
            .one_or_none()
        )
        if record:
            record.value = value
            return record
        record = MirrorEntry(scope=scope, key=key, value=value)
        session.add(record)
        return record


def list_keys(scope: str) -> List[str]:
    with app_session() as session:
        rows = (
            session.query(MirrorEntry.key)
            .filter(MirrorEntry.scope == scope)
            .order_by(MirrorEntry.key)
            .all()
        )
        return [row[0] for row in rows]


def clear_scope(scope: str) -> int:
    with app_session() as session:
        return (
            session.query(MirrorEntry)
            .filter(MirrorEntry.scope == scope)
            .delete(synchronize_session=False)
        )


__all__ = ["get_value", "put_value", "list_keys", "clear_scope"]

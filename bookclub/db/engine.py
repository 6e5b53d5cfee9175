"""SQLite engine and sessions behind the local mirror.

The mirror lives in one SQLite file (BOOKCLUB_DB_PATH) shared by all browser
sessions; rows are partitioned by session scope, not by database. Tests point
the path at `:memory:` and call `reset_for_tests` between cases.
"""
from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

try:
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - non-POSIX
    fcntl = None  # type: ignore

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session as SASession, scoped_session, sessionmaker

from bookclub import config as app_config
from bookclub.db.models import Base
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.db")

MEMORY_PATH = ":memory:"
SCHEMA_LOCK_NAME = ".bookclub_schema.lock"

_engine: Optional[Engine] = None
_scoped: Optional[scoped_session] = None
_LOCK = threading.Lock()


def _mirror_db_dir(db_path: str) -> str:
    parent_dir = os.path.dirname(os.path.abspath(db_path)) or "."
    os.makedirs(parent_dir, exist_ok=True)
    if not os.access(parent_dir, os.W_OK):
        raise RuntimeError(f"mirror DB directory not writable: {parent_dir}")
    return parent_dir


def _create_mirror_tables() -> None:
    try:
        Base.metadata.create_all(_engine)  # type: ignore[arg-type]
    except OperationalError as exc:  # pragma: no cover - two workers racing
        if "already exists" not in str(exc).lower():
            raise
        LOG.warning("mirror_entries already created by another worker")


def _create_tables_locked(parent_dir: str) -> None:
    if fcntl is None:
        _create_mirror_tables()
        return
    with open(os.path.join(parent_dir, SCHEMA_LOCK_NAME), "w") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            _create_mirror_tables()
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def init_engine_once() -> None:
    global _engine, _scoped
    if _engine is not None:
        return
    with _LOCK:
        if _engine is not None:
            return
        db_path = app_config.get_db_path()
        LOG.info("Opening mirror database at %s", db_path)
        if db_path == MEMORY_PATH:
            _engine = create_engine("sqlite:///:memory:", future=True)
            _create_mirror_tables()
        else:
            parent_dir = _mirror_db_dir(db_path)
            _engine = create_engine(f"sqlite:///{db_path}", future=True)
            _create_tables_locked(parent_dir)
        _scoped = scoped_session(sessionmaker(bind=_engine, expire_on_commit=False, class_=SASession))
        LOG.debug("mirror schema ready")


def get_scoped_session() -> scoped_session:
    if _scoped is None:
        init_engine_once()
    if _scoped is None:
        raise RuntimeError("Mirror session could not be initialized.")
    return _scoped


@contextmanager
def app_session() -> Iterator[SASession]:
    """One unit of mirror work: commit on success, roll back on error."""
    sess = get_scoped_session()()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()


def reset_for_tests(drop: bool = False) -> None:
    global _engine, _scoped
    with _LOCK:
        if _scoped is not None:
            _scoped.remove()
        if _engine is not None:
            if drop:
                Base.metadata.drop_all(_engine)
            _engine.dispose()
        _engine = None
        _scoped = None


__all__ = [
    "init_engine_once",
    "get_scoped_session",
    "app_session",
    "reset_for_tests",
]

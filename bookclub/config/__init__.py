"""Application configuration accessors.

Centralizes environment variable parsing & defaults. Values are read on every
call so operators (and tests) can change them without a restart.
"""
from __future__ import annotations

import os
from functools import lru_cache

APP_NAME = "bookclub"
APP_VERSION = "0.4.0"
APP_DESCRIPTION = "Book club reading list, voting and study guides sync layer"

DEFAULT_DB_PATH = "bookclub.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SECRET_KEY = "bookclub-dev-secret"


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _clean_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def get_db_path() -> str:
    raw = _raw_env("BOOKCLUB_DB_PATH", DEFAULT_DB_PATH)
    if raw and raw != ":memory:" and not os.path.isabs(raw):
        data_dir = _clean_env("BOOKCLUB_DATA_DIR")
        if data_dir:
            return os.path.join(data_dir, raw)
    return raw  # type: ignore[return-value]


def log_level_name() -> str:
    return _raw_env("BOOKCLUB_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


def script_url() -> str | None:
    """Remote spreadsheet endpoint (BOOKCLUB_SCRIPT_URL).

    When unset, reads fall back to the local mirror and remote writes are
    skipped.
    """
    return _clean_env("BOOKCLUB_SCRIPT_URL")


def master_admin_email() -> str | None:
    """Master administrator address (BOOKCLUB_MASTER_ADMIN_EMAIL), lowercased."""
    value = _clean_env("BOOKCLUB_MASTER_ADMIN_EMAIL")
    return value.lower() if value else None


def request_timeout() -> float | None:
    """Optional per-request timeout in seconds (BOOKCLUB_REQUEST_TIMEOUT).

    None leaves the transport default in place.
    """
    raw = _clean_env("BOOKCLUB_REQUEST_TIMEOUT")
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def secret_key() -> str:
    return _clean_env("BOOKCLUB_SECRET_KEY") or DEFAULT_SECRET_KEY


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "db_path": get_db_path(),
        "log_level": log_level_name(),
        "remote_configured": script_url() is not None,
        "master_admin_set": master_admin_email() is not None,
        "request_timeout": request_timeout(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "get_db_path",
    "log_level_name",
    "script_url",
    "master_admin_email",
    "request_timeout",
    "secret_key",
    "metadata",
    "summarize_runtime_config",
]

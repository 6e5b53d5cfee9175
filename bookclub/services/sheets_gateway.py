"""Remote store gateway (spreadsheet script endpoint).

Every request is a plain GET carrying `action` and, when there is data to
send, a JSON `payload` query parameter. Plain GETs avoid the CORS pre-flight
the script endpoint cannot answer.

Failure handling:
    * endpoint unset, transport error, non-2xx status, undecodable body:
      logged and reported as ``None`` (endpoint unavailable)
    * body ``{"status": "error", "message": ...}``: raises RemoteStoreError
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

import requests

from bookclub import config
from bookclub.services.errors import RemoteStoreError
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.sheets_gateway")

RECOGNIZED_ACTIONS = frozenset({
    "getBooks",
    "getGuides",
    "getVotes",
    "getGenreVotes",
    "getAdmins",
    "getUserHistory",
    "saveBook",
    "saveGuide",
    "saveVote",
    "vote",
    "deleteBook",
    "deleteGuide",
    "clearVotes",
    "voteGenre",
    "resetGenreVotes",
    "saveProfile",
})


def build_params(action: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    params = {"action": action}
    if payload is not None:
        params["payload"] = json.dumps({"action": action, **payload})
    return params


def call(action: str, payload: Optional[Dict[str, Any]] = None) -> Any:
    """Issue one request for `action`; return the decoded body or None."""
    if action not in RECOGNIZED_ACTIONS:
        raise ValueError(f"unknown remote action: {action}")
    url = config.script_url()
    if not url:
        LOG.warning("Remote script URL not set; using local fallback action=%s", action)
        return None
    try:
        resp = requests.get(url, params=build_params(action, payload), timeout=config.request_timeout())
    except requests.RequestException as exc:
        LOG.warning("Remote call failed action=%s error=%s", action, exc)
        return None
    if not 200 <= resp.status_code < 300:
        LOG.warning("Remote call returned HTTP %s action=%s", resp.status_code, action)
        return None
    try:
        data = resp.json()
    except ValueError:
        LOG.warning("Remote call returned non-JSON body action=%s", action)
        return None
    if isinstance(data, dict) and data.get("status") == "error":
        message = str(data.get("message") or "unknown error")
        LOG.error("Remote store reported error action=%s message=%s", action, message)
        raise RemoteStoreError(action, message)
    return data


__all__ = ["RECOGNIZED_ACTIONS", "build_params", "call"]

"""Shared fixtures: in-memory mirror DB and an in-process remote sheet."""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import pytest

from bookclub.db.engine import init_engine_once, reset_for_tests
from bookclub.services import sheets_gateway
from bookclub.services.errors import RemoteStoreError


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("BOOKCLUB_DB_PATH", ":memory:")
    monkeypatch.delenv("BOOKCLUB_SCRIPT_URL", raising=False)
    monkeypatch.delenv("BOOKCLUB_MASTER_ADMIN_EMAIL", raising=False)
    monkeypatch.delenv("BOOKCLUB_REQUEST_TIMEOUT", raising=False)
    init_engine_once()
    yield
    reset_for_tests(drop=True)


class FakeSheet:
    """Stand-in for the spreadsheet script endpoint.

    Honors the action contract: list actions return row arrays, writes return
    ``{"status": "success"}`` (plus the assigned id for saves). Set
    ``offline`` to mimic an unreachable endpoint, or put an action name in
    ``errors`` to get an error-tagged response.
    """

    SAVE_TABLES = {"saveBook": "books", "saveGuide": "study_guides", "saveVote": "voting_options"}
    READ_TABLES = {"getBooks": "books", "getGuides": "study_guides", "getVotes": "voting_options", "getGenreVotes": "genre_votes"}
    DELETE_TABLES = {"deleteBook": "books", "deleteGuide": "study_guides"}
    CREATED_COLUMN = {"books": "created_at", "study_guides": "uploaded_at", "voting_options": "created_at"}

    def __init__(self):
        self.offline = False
        self.errors: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "books": [],
            "study_guides": [],
            "voting_options": [],
            "genre_votes": [],
            "users": [],
            "user_genre_history": [],
        }
        self._next_id = 100

    def actions(self) -> List[str]:
        return [action for action, _payload in self.calls]

    def __call__(self, action: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        self.calls.append((action, copy.deepcopy(payload)))
        if self.offline:
            return None
        if action in self.errors:
            raise RemoteStoreError(action, self.errors[action])
        payload = payload or {}
        if action in self.READ_TABLES:
            return copy.deepcopy(self.tables[self.READ_TABLES[action]])
        if action in self.SAVE_TABLES:
            table = self.SAVE_TABLES[action]
            self._next_id += 1
            row = {"id": self._next_id, **payload["row"], self.CREATED_COLUMN[table]: "2026-10-01T10:00:00Z"}
            if "is_member" in row:
                row["is_member"] = "TRUE" if row["is_member"] else "FALSE"
            self.tables[table].append(row)
            return {"status": "success", "id": self._next_id}
        if action in self.DELETE_TABLES:
            table = self.DELETE_TABLES[action]
            self.tables[table] = [r for r in self.tables[table] if str(r["id"]) != str(payload["id"])]
            return {"status": "success"}
        if action == "vote":
            for row in self.tables["voting_options"]:
                if str(row["id"]) == str(payload["id"]):
                    row["votes"] = int(row.get("votes") or 0) + 1
            return {"status": "success"}
        if action == "clearVotes":
            self.tables["voting_options"] = []
            return {"status": "success"}
        if action == "voteGenre":
            rows = self.tables["genre_votes"]
            match = next((r for r in rows if r["id"] == payload["id"]), None)
            if match is None:
                match = {"id": payload["id"], "name": payload["id"], "votes": 0}
                rows.append(match)
            match["votes"] = int(match["votes"]) + 1
            self.tables["user_genre_history"].append(dict(payload["history"]))
            return {"status": "success"}
        if action == "resetGenreVotes":
            self.tables["genre_votes"] = []
            self.tables["user_genre_history"] = []
            return {"status": "success"}
        if action == "getUserHistory":
            return [dict(r) for r in self.tables["user_genre_history"] if r["email"] == payload.get("email")]
        if action == "getAdmins":
            return [{"email": u["email"]} for u in self.tables["users"] if u.get("is_admin")]
        if action == "saveProfile":
            row = payload["row"]
            for user in self.tables["users"]:
                if user["email"] == row["email"]:
                    user.update(name=row["name"], last_active=row["last_active"])
                    return {"status": "success"}
            self.tables["users"].append({**row, "is_admin": False})
            return {"status": "success"}
        return {"status": "error", "message": f"unhandled action {action}"}


@pytest.fixture
def fake_sheet(monkeypatch):
    sheet = FakeSheet()
    monkeypatch.setattr(sheets_gateway, "call", sheet)
    return sheet

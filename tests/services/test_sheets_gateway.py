"""Tests for the remote store gateway request/response handling."""
from __future__ import annotations

import json

import pytest
import requests

from bookclub.services import sheets_gateway
from bookclub.services.errors import RemoteStoreError

SCRIPT_URL = "https://script.example.com/exec"


class DummyResp:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        self._body = body
        self._raw = raw

    def json(self):
        if self._raw is not None:
            raise ValueError("not json")
        return self._body


@pytest.fixture
def captured(monkeypatch):
    monkeypatch.setenv("BOOKCLUB_SCRIPT_URL", SCRIPT_URL)
    calls = []
    response = {"resp": DummyResp(body=[])}

    def fake_get(url, params=None, timeout=None):
        calls.append({"url": url, "params": params, "timeout": timeout})
        result = response["resp"]
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(sheets_gateway.requests, "get", fake_get)
    return {"calls": calls, "response": response}


def test_unset_url_returns_none_without_request(monkeypatch):
    called = []
    monkeypatch.setattr(sheets_gateway.requests, "get", lambda *a, **k: called.append(a))

    assert sheets_gateway.call("getBooks") is None
    assert called == []


def test_read_action_sends_only_action_param(captured):
    captured["response"]["resp"] = DummyResp(body=[{"id": 1, "title": "Dune"}])

    result = sheets_gateway.call("getBooks")

    assert result == [{"id": 1, "title": "Dune"}]
    call = captured["calls"][0]
    assert call["url"] == SCRIPT_URL
    assert call["params"] == {"action": "getBooks"}
    assert call["timeout"] is None


def test_payload_is_json_merged_with_action(captured):
    captured["response"]["resp"] = DummyResp(body={"status": "success", "id": 7})

    result = sheets_gateway.call("saveVote", {"row": {"book_title": "Dune"}})

    assert result == {"status": "success", "id": 7}
    params = captured["calls"][0]["params"]
    assert params["action"] == "saveVote"
    assert json.loads(params["payload"]) == {"action": "saveVote", "row": {"book_title": "Dune"}}


def test_timeout_comes_from_config(captured, monkeypatch):
    monkeypatch.setenv("BOOKCLUB_REQUEST_TIMEOUT", "2.5")

    sheets_gateway.call("getVotes")

    assert captured["calls"][0]["timeout"] == 2.5


@pytest.mark.parametrize("status", [301, 404, 500])
def test_non_2xx_status_returns_none(captured, status):
    captured["response"]["resp"] = DummyResp(status_code=status, body={"status": "success"})

    assert sheets_gateway.call("getGuides") is None


def test_transport_error_returns_none(captured):
    captured["response"]["resp"] = requests.ConnectionError("unreachable")

    assert sheets_gateway.call("getGuides") is None


def test_non_json_body_returns_none(captured):
    captured["response"]["resp"] = DummyResp(raw="<html>")

    assert sheets_gateway.call("getGuides") is None


def test_error_tagged_body_raises(captured):
    captured["response"]["resp"] = DummyResp(body={"status": "error", "message": "Sheet not found"})

    with pytest.raises(RemoteStoreError) as excinfo:
        sheets_gateway.call("getBooks")
    assert excinfo.value.action == "getBooks"
    assert excinfo.value.message == "Sheet not found"


def test_unknown_action_is_rejected(captured):
    with pytest.raises(ValueError):
        sheets_gateway.call("dropEverything")
    assert captured["calls"] == []

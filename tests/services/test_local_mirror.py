"""Tests for the LocalMirror wrapper."""
from __future__ import annotations

import pytest

from bookclub.db.repositories import mirror_repo
from bookclub.services.local_mirror import BOOKS_KEY, CURRENT_USER_KEY, LocalMirror


def test_read_list_defaults_to_empty():
    assert LocalMirror("s1").read_list(BOOKS_KEY) == []


def test_write_and_read_list_keeps_order():
    mirror = LocalMirror("s1")
    mirror.write_list(BOOKS_KEY, [{"id": "b"}, {"id": "a"}])

    assert mirror.read_list(BOOKS_KEY) == [{"id": "b"}, {"id": "a"}]
    assert LocalMirror("s2").read_list(BOOKS_KEY) == []


def test_legacy_plain_text_value_is_returned_as_string():
    mirror_repo.put_value("s1", CURRENT_USER_KEY, "Ann Reader")

    assert LocalMirror("s1").read_value(CURRENT_USER_KEY) == "Ann Reader"


def test_non_list_value_reads_as_empty_list():
    mirror = LocalMirror("s1")
    mirror.write_value(BOOKS_KEY, {"unexpected": True})

    assert mirror.read_list(BOOKS_KEY) == []


def test_scope_required():
    with pytest.raises(ValueError):
        LocalMirror("")


def test_clear_removes_all_keys_of_scope():
    mirror = LocalMirror("s1")
    mirror.write_list(BOOKS_KEY, [])
    mirror.write_value(CURRENT_USER_KEY, {"name": "Ann"})

    assert sorted(mirror.keys()) == sorted([BOOKS_KEY, CURRENT_USER_KEY])
    assert mirror.clear() == 2
    assert mirror.keys() == []

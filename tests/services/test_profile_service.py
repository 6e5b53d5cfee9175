"""Tests for session identity and admin checks."""
from __future__ import annotations

import pytest

from bookclub.services import profile_service
from bookclub.services.entities import UserProfile
from bookclub.services.local_mirror import CURRENT_USER_KEY, LocalMirror
from bookclub.db.repositories import mirror_repo


@pytest.fixture
def mirror():
    return LocalMirror("profile-session")


def test_default_user_when_nothing_stored(mirror):
    user = profile_service.get_current_user(mirror)
    assert user == UserProfile(name="Book Club Member", email="")


def test_legacy_plain_string_user_record(mirror):
    mirror_repo.put_value(mirror.scope, CURRENT_USER_KEY, "Ann")

    assert profile_service.get_current_user(mirror) == UserProfile(name="Ann", email="")


@pytest.mark.parametrize("stored", ["2024", "true", "null", "\"Ann\""])
def test_legacy_names_that_look_like_json_are_kept(mirror, stored):
    mirror_repo.put_value(mirror.scope, CURRENT_USER_KEY, stored)

    expected = "Ann" if stored == "\"Ann\"" else stored
    assert profile_service.get_current_user(mirror) == UserProfile(name=expected, email="")


def test_set_current_user_round_trips(mirror, fake_sheet):
    profile_service.set_current_user(mirror, UserProfile(name=" Ann ", email="ann@example.com"))

    assert profile_service.get_current_user(mirror) == UserProfile(name="Ann", email="ann@example.com")
    assert fake_sheet.calls == []


def test_sync_profile_sends_normalized_email(fake_sheet):
    profile_service.sync_profile(UserProfile(name="Ann", email="Ann@Example.com"))

    action, payload = fake_sheet.calls[0]
    assert action == "saveProfile"
    assert payload["row"]["email"] == "ann@example.com"
    assert payload["row"]["name"] == "Ann"
    assert payload["row"]["last_active"]
    assert fake_sheet.tables["users"][0]["is_admin"] is False


def test_sync_profile_swallows_remote_errors(fake_sheet):
    fake_sheet.errors["saveProfile"] = "quota exceeded"

    profile_service.sync_profile(UserProfile(name="Ann", email="ann@example.com"))


def test_sync_profile_without_email_is_skipped(fake_sheet):
    profile_service.sync_profile(UserProfile(name="Ann"))
    assert fake_sheet.calls == []


def test_master_admin_matches_case_insensitively(fake_sheet, monkeypatch):
    monkeypatch.setenv("BOOKCLUB_MASTER_ADMIN_EMAIL", "Chair@Club.org")

    assert profile_service.is_admin(UserProfile(name="Chair", email="chair@CLUB.org")) is True


def test_remote_admin_list_is_checked_every_call(fake_sheet):
    fake_sheet.tables["users"] = [{"email": "Mod@Club.org", "is_admin": True}]
    moderator = UserProfile(name="Mod", email="mod@club.org")

    assert profile_service.is_admin(moderator) is True
    fake_sheet.tables["users"] = []
    assert profile_service.is_admin(moderator) is False
    assert fake_sheet.actions() == ["getAdmins", "getAdmins"]


def test_plain_string_admin_list_is_accepted(monkeypatch):
    monkeypatch.setattr(profile_service.sheets_gateway, "call", lambda action, payload=None: ["admin@club.org"])

    assert profile_service.get_admin_emails() == ["admin@club.org"]


def test_no_email_is_never_admin(fake_sheet, monkeypatch):
    monkeypatch.setenv("BOOKCLUB_MASTER_ADMIN_EMAIL", "chair@club.org")

    assert profile_service.is_admin(UserProfile(name="Guest")) is False
    assert fake_sheet.calls == []


def test_admin_list_error_means_not_admin(fake_sheet):
    fake_sheet.errors["getAdmins"] = "denied"

    assert profile_service.is_admin(UserProfile(name="Ann", email="ann@example.com")) is False

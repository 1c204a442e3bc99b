"""Tests for Google Calendar adapter."""

import json
from datetime import date, timezone
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest

from loadcal.adapters.google_calendar import (
    AuthenticationError,
    GoogleCalendarAdapter,
    map_google_event,
)
from loadcal.adapters.token_store import FileTokenStore, MemoryTokenStore


class TestMapGoogleEvent:
    def test_timed_event(self):
        mapped = map_google_event(
            {
                "id": "abc",
                "summary": "API Design Review",
                "description": "v2",
                "start": {"dateTime": "2025-01-15T10:00:00-05:00"},
                "end": {"dateTime": "2025-01-15T11:30:00-05:00"},
                "attendees": [{"email": "a"}, {"email": "b"}, {"email": "c"}],
            }
        )
        assert mapped == {
            "id": "abc",
            "title": "API Design Review",
            "description": "v2",
            "start": "2025-01-15T10:00:00-05:00",
            "end": "2025-01-15T11:30:00-05:00",
            "attendeeCount": 3,
            "userRole": "contributor",
            "meetingType": "status",
            "emotionalIntensity": "routine",
            "topicTags": ["api", "design", "review"],
        }

    def test_all_day_event_pinned_to_morning_hour(self):
        mapped = map_google_event(
            {"id": "h", "summary": "Offsite", "start": {"date": "2025-01-15"}, "end": {"date": "2025-01-16"}},
            ZoneInfo("America/Toronto"),
        )
        assert mapped["start"] == "2025-01-15T09:00:00-05:00"
        assert mapped["end"] == "2025-01-15T10:00:00-05:00"

    def test_missing_end_is_one_hour(self):
        mapped = map_google_event({"start": {"dateTime": "2025-01-15T10:00:00Z"}})
        assert mapped["end"] == "2025-01-15T11:00:00+00:00"
        assert mapped["title"] == "Untitled Meeting"
        assert mapped["attendeeCount"] == 1
        assert mapped["topicTags"] == ["general"]
        assert mapped["id"] == "1736935200000"

    def test_no_start(self):
        assert map_google_event({"summary": "Broken"}) is None


class TestGoogleCalendarAdapter:
    def test_default_calendar(self):
        adapter = GoogleCalendarAdapter(MemoryTokenStore())
        assert adapter.calendar_id == "primary"
        assert adapter.tz == timezone.utc

    def test_has_tokens(self):
        assert GoogleCalendarAdapter(MemoryTokenStore()).has_tokens() is False
        assert GoogleCalendarAdapter(MemoryTokenStore('{"token": "x"}')).has_tokens() is True

    def test_missing_tokens_raise(self):
        adapter = GoogleCalendarAdapter(MemoryTokenStore())
        with pytest.raises(AuthenticationError):
            adapter.fetch_day(date(2025, 1, 15))

    @patch("loadcal.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_fetch_day(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.events().list().execute.return_value = {
            "items": [
                {
                    "id": "1",
                    "summary": "Standup",
                    "start": {"dateTime": "2025-01-15T10:00:00-05:00"},
                    "end": {"dateTime": "2025-01-15T10:30:00-05:00"},
                },
                {"id": "2", "summary": "No start"},
            ]
        }

        adapter = GoogleCalendarAdapter(MemoryTokenStore(), calendar_id="work", timezone_name="America/Toronto")
        events = adapter.fetch_day(date(2025, 1, 15))

        assert [e["id"] for e in events] == ["1"]
        kwargs = service.events().list.call_args.kwargs
        assert kwargs["calendarId"] == "work"
        assert kwargs["timeMin"] == "2025-01-15T00:00:00-05:00"
        assert kwargs["timeMax"] == "2025-01-16T00:00:00-05:00"
        assert kwargs["singleEvents"] is True
        assert kwargs["orderBy"] == "startTime"

    @patch("loadcal.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_list_calendars(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.calendarList().list().execute.return_value = {
            "items": [
                {"id": "me@example.com", "summary": "Me", "primary": True},
                {"id": "team@group", "summary": "Team"},
            ]
        }

        calendars = GoogleCalendarAdapter(MemoryTokenStore()).list_calendars()
        assert calendars == [
            {"id": "me@example.com", "summary": "Me", "primary": True},
            {"id": "team@group", "summary": "Team", "primary": False},
        ]

    def test_authenticate_without_secret_file(self):
        assert GoogleCalendarAdapter(MemoryTokenStore()).authenticate() is False

    def test_authenticate_with_missing_secret_file(self, tmp_path):
        adapter = GoogleCalendarAdapter(MemoryTokenStore(), client_secret_file=str(tmp_path / "nope.json"))
        assert adapter.authenticate() is False

    @patch("google_auth_oauthlib.flow.InstalledAppFlow.from_client_secrets_file")
    def test_authenticate_saves_token(self, mock_flow, tmp_path):
        secret = tmp_path / "secret.json"
        secret.write_text("{}")
        creds = MagicMock()
        creds.to_json.return_value = '{"token": "abc"}'
        mock_flow.return_value.run_local_server.return_value = creds

        store = MemoryTokenStore()
        adapter = GoogleCalendarAdapter(store, client_secret_file=str(secret))

        assert adapter.authenticate() is True
        assert store.load() == '{"token": "abc"}'

    @patch("google.oauth2.credentials.Credentials.from_authorized_user_info")
    def test_expired_token_is_refreshed_and_saved(self, mock_from_info):
        creds = MagicMock()
        creds.expired = True
        creds.refresh_token = "r"
        creds.to_json.return_value = '{"token": "fresh"}'
        mock_from_info.return_value = creds

        store = MemoryTokenStore(json.dumps({"token": "stale", "refresh_token": "r"}))
        adapter = GoogleCalendarAdapter(store)

        assert adapter._get_credentials() is creds
        creds.refresh.assert_called_once()
        assert store.load() == '{"token": "fresh"}'

    @patch("google.oauth2.credentials.Credentials.from_authorized_user_info")
    def test_revoked_token_is_cleared(self, mock_from_info):
        from google.auth.exceptions import RefreshError

        creds = MagicMock()
        creds.expired = True
        creds.refresh_token = "r"
        creds.refresh.side_effect = RefreshError("invalid_grant")
        mock_from_info.return_value = creds

        store = MemoryTokenStore(json.dumps({"token": "stale", "refresh_token": "r"}))
        adapter = GoogleCalendarAdapter(store)

        with pytest.raises(AuthenticationError, match="cal-auth"):
            adapter._get_credentials()
        assert store.load() is None
        assert adapter.has_tokens() is False


class TestTokenStores:
    def test_memory_store(self):
        store = MemoryTokenStore()
        assert store.load() is None
        store.save("{}")
        assert store.load() == "{}"
        store.clear()
        assert store.load() is None

    def test_file_store(self, tmp_path):
        store = FileTokenStore(tmp_path / "config" / "token.json")
        assert store.load() is None
        store.save('{"token": "x"}')
        assert store.load() == '{"token": "x"}'
        assert (store.path.stat().st_mode & 0o777) == 0o600
        store.clear()
        assert store.load() is None
        store.clear()

"""Google Calendar API adapter."""

import json
import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from loadcal.core.classification import topic_tags_from_title
from loadcal.ports.token_store import TokenStore

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]

# All-day items are pinned to a one-hour block at this time
ALL_DAY_START = time(9, 0)
DEFAULT_LENGTH = timedelta(hours=1)


class AuthenticationError(Exception):
    """Raised when calendar credentials are missing or unusable."""

    pass


def map_google_event(item: dict, tz: tzinfo = timezone.utc) -> dict | None:
    """
    Map a Google Calendar API item to a raw meeting dict.

    Returns None for items without a usable start.
    """
    start_raw = item.get("start", {})
    end_raw = item.get("end", {})

    if "dateTime" in start_raw:
        start_dt = datetime.fromisoformat(start_raw["dateTime"].replace("Z", "+00:00"))
        if "dateTime" in end_raw:
            end_dt = datetime.fromisoformat(end_raw["dateTime"].replace("Z", "+00:00"))
        else:
            end_dt = start_dt + DEFAULT_LENGTH
    elif "date" in start_raw:
        start_dt = datetime.combine(date.fromisoformat(start_raw["date"]), ALL_DAY_START, tzinfo=tz)
        end_dt = start_dt + DEFAULT_LENGTH
    else:
        return None

    title = item.get("summary") or "Untitled Meeting"
    return {
        "id": item.get("id") or str(int(start_dt.timestamp() * 1000)),
        "title": title,
        "description": item.get("description") or "",
        "start": start_dt.isoformat(),
        "end": end_dt.isoformat(),
        "attendeeCount": len(item.get("attendees") or []) or 1,
        "userRole": "contributor",
        "meetingType": "status",
        "emotionalIntensity": "routine",
        "topicTags": topic_tags_from_title(item.get("summary") or ""),
    }


class GoogleCalendarAdapter:
    """
    Fetches meetings from Google Calendar via the API.

    Implements CalendarRepository protocol. Tokens live in the injected
    TokenStore, so nothing here is process-wide state.
    """

    def __init__(
        self,
        token_store: TokenStore,
        calendar_id: str = "primary",
        client_secret_file: str = "",
        timezone_name: str = "",
    ):
        self.token_store = token_store
        self.calendar_id = calendar_id or "primary"
        self.client_secret_file = client_secret_file
        self.tz = ZoneInfo(timezone_name) if timezone_name else timezone.utc

    def has_tokens(self) -> bool:
        return bool(self.token_store.load())

    def _get_credentials(self):
        """Load credentials from the token store, refreshing if needed."""
        from google.auth.exceptions import RefreshError
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        if not self.has_tokens():
            raise AuthenticationError("Not authenticated with Google. Run 'loadcal cal-auth' first.")

        creds = Credentials.from_authorized_user_info(json.loads(self.token_store.load()), SCOPES)

        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except RefreshError as e:
                # Revoked or expired grant; the stored token is useless now
                self.token_store.clear()
                raise AuthenticationError(
                    f"Failed to refresh Google token: {e}. Run 'loadcal cal-auth' again."
                ) from e
            self.token_store.save(creds.to_json())

        return creds

    def _build_service(self):
        """Build a Google Calendar API service."""
        from googleapiclient.discovery import build

        return build("calendar", "v3", credentials=self._get_credentials(), cache_discovery=False)

    def authenticate(self) -> bool:
        """Run OAuth flow and store the resulting token. Returns True on success."""
        from google_auth_oauthlib.flow import InstalledAppFlow

        if not self.client_secret_file:
            logger.error("No client secret file configured")
            return False

        secret_path = Path(self.client_secret_file).expanduser()
        if not secret_path.exists():
            logger.error(f"Client secret file not found: {secret_path}")
            return False

        flow = InstalledAppFlow.from_client_secrets_file(str(secret_path), SCOPES)
        creds = flow.run_local_server(port=0, access_type="offline", prompt="consent")
        self.token_store.save(creds.to_json())
        return True

    def fetch_range(self, time_min: datetime, time_max: datetime) -> list[dict]:
        """Fetch meetings starting within [time_min, time_max), ordered by start."""
        from googleapiclient.errors import HttpError

        service = self._build_service()
        try:
            result = (
                service.events()
                .list(
                    calendarId=self.calendar_id,
                    timeMin=time_min.isoformat(),
                    timeMax=time_max.isoformat(),
                    singleEvents=True,
                    orderBy="startTime",
                )
                .execute()
            )
        except HttpError as e:
            logger.warning(f"Google Calendar API error for {self.calendar_id}: {e}")
            return []

        events = []
        for item in result.get("items", []):
            mapped = map_google_event(item, self.tz)
            if mapped is None:
                logger.debug(f"Skipping item without start: {item.get('id')}")
                continue
            events.append(mapped)
        return events

    def fetch_day(self, target_date: date) -> list[dict]:
        """Fetch meetings for a specific date."""
        day_start = datetime.combine(target_date, time(0, 0), tzinfo=self.tz)
        return self.fetch_range(day_start, day_start + timedelta(days=1))

    def list_calendars(self) -> list[dict]:
        """List calendars as {id, summary, primary} dicts."""
        service = self._build_service()
        result = service.calendarList().list().execute()
        return [
            {
                "id": entry.get("id", ""),
                "summary": entry.get("summary", ""),
                "primary": bool(entry.get("primary")),
            }
            for entry in result.get("items", [])
        ]

"""Calendar repository interface."""

from datetime import date, datetime
from typing import Protocol


class CalendarRepository(Protocol):
    """Interface for fetching raw meeting dicts from any calendar backend."""

    def fetch_range(self, time_min: datetime, time_max: datetime) -> list[dict]:
        """Fetch meetings starting within [time_min, time_max)."""
        ...

    def fetch_day(self, target_date: date) -> list[dict]:
        """Fetch meetings for a specific date."""
        ...

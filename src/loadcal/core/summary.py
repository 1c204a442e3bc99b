"""Daily summary and the scoring pipeline entry point - no I/O dependencies."""

from dataclasses import dataclass
from datetime import tzinfo
from typing import Sequence

from .load import FULL_CAPACITY, EnrichedMeeting, clamp, compute_event_loads
from .meetings import ClassifiedMeeting
from .weights import DEFAULT_WEIGHTS, WeightTable

HIGH_RISK_THRESHOLD = 20


class UnsortedMeetings(ValueError):
    """Raised when meetings are not in ascending start order."""

    pass


@dataclass(frozen=True)
class DailySummary:
    """Day-level verdict over all scored meetings."""

    total_load: float
    capacity_remaining: float
    high_risk: bool

    def to_dict(self) -> dict:
        return {
            "totalLoad": self.total_load,
            "capacityRemaining": round(self.capacity_remaining, 3),
            "highRisk": self.high_risk,
        }


@dataclass(frozen=True)
class DayReport:
    """Scored meetings plus their summary."""

    events: tuple[EnrichedMeeting, ...]
    summary: DailySummary

    def to_dict(self) -> dict:
        return {
            "events": [e.to_dict() for e in self.events],
            "summary": self.summary.to_dict(),
        }


def build_daily_summary(events: Sequence[EnrichedMeeting]) -> DailySummary:
    """
    Reduce scored meetings to a daily summary.

    An empty day has zero load and full capacity.
    """
    total_load = clamp(sum(e.total_load for e in events) / max(1, len(events)))
    capacity_remaining = max(0.0, FULL_CAPACITY - sum(e.capacity_cost for e in events))
    return DailySummary(
        total_load=total_load,
        capacity_remaining=capacity_remaining,
        high_risk=capacity_remaining < HIGH_RISK_THRESHOLD,
    )


def check_chronological(meetings: Sequence[ClassifiedMeeting]) -> None:
    """Raise UnsortedMeetings if any meeting starts before the one before it."""
    for previous, current in zip(meetings, meetings[1:]):
        if current.start < previous.start:
            raise UnsortedMeetings(
                f"Meeting {current.id!r} starts at {current.start.isoformat()}, "
                f"before {previous.id!r} at {previous.start.isoformat()}"
            )


def localize(meeting: ClassifiedMeeting, tz: tzinfo) -> ClassifiedMeeting:
    """Copy of ``meeting`` with start/end expressed in ``tz``."""
    return ClassifiedMeeting(
        id=meeting.id,
        title=meeting.title,
        start=meeting.start.astimezone(tz),
        end=meeting.end.astimezone(tz),
        attendee_count=meeting.attendee_count,
        classification=meeting.classification,
        description=meeting.description,
        extra=meeting.extra,
    )


def score_day(
    meetings: Sequence[ClassifiedMeeting],
    weights: WeightTable = DEFAULT_WEIGHTS,
    tz: tzinfo | None = None,
) -> DayReport:
    """
    Score a day of classified meetings.

    Pure function - no I/O. Meetings must be sorted by start; the input is
    validated but never reordered. When ``tz`` is given, times are converted
    to it before time-of-day bucketing.
    """
    meetings = list(meetings)
    check_chronological(meetings)
    if tz is not None:
        meetings = [localize(m, tz) for m in meetings]

    events = compute_event_loads(meetings, weights)
    return DayReport(events=tuple(events), summary=build_daily_summary(events))

"""Functional core - pure business logic with no I/O."""

from .weights import (
    DEFAULT_WEIGHTS,
    EmotionalIntensity,
    MeetingType,
    Role,
    TimeOfDay,
    TopicChange,
    WeightTable,
    gap_dampener_for,
    social_load_for,
    time_of_day_for,
)
from .meetings import Classification, ClassifiedMeeting, InvalidTimestamp, parse_timestamp
from .load import (
    EnrichedMeeting,
    Explanation,
    clamp,
    compute_event_loads,
    compute_meeting_load,
    context_switch_cost,
    fold_capacity,
)
from .summary import DailySummary, DayReport, UnsortedMeetings, build_daily_summary, score_day

__all__ = [
    # Weights
    "DEFAULT_WEIGHTS",
    "EmotionalIntensity",
    "MeetingType",
    "Role",
    "TimeOfDay",
    "TopicChange",
    "WeightTable",
    "gap_dampener_for",
    "social_load_for",
    "time_of_day_for",
    # Meetings
    "Classification",
    "ClassifiedMeeting",
    "InvalidTimestamp",
    "parse_timestamp",
    # Load
    "EnrichedMeeting",
    "Explanation",
    "clamp",
    "compute_event_loads",
    "compute_meeting_load",
    "context_switch_cost",
    "fold_capacity",
    # Summary
    "DailySummary",
    "DayReport",
    "UnsortedMeetings",
    "build_daily_summary",
    "score_day",
]

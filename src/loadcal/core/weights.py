"""Weight table and bucket functions - no I/O dependencies."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class MeetingType(Enum):
    STANDUP = "standup"
    STATUS = "status"
    DEMO = "demo"
    PLANNING = "planning"
    BRAINSTORMING = "brainstorming"
    DESIGN_REVIEW = "design_review"
    DECISION = "decision"
    CONFLICT = "conflict"
    SYNC = "sync"
    SOCIAL = "social"


class Role(Enum):
    LISTENER = "listener"
    OCCASIONAL_CONTRIBUTOR = "occasional_contributor"
    CONTRIBUTOR = "contributor"
    DECISION_MAKER = "decision_maker"


class EmotionalIntensity(Enum):
    ROUTINE = "routine"
    EXTERNAL = "external"
    FEEDBACK = "feedback"
    PERFORMANCE = "performance"
    CONFLICT = "conflict"


class TopicChange(Enum):
    SAME_PROJECT = "same_project"
    RELATED_DOMAIN = "related_domain"
    DIFFERENT_DOMAIN = "different_domain"
    UNRELATED = "unrelated"


class TimeOfDay(Enum):
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"


# Categories accepted by WeightTable.lookup()
MEETING_TYPE = "meeting_type"
MEETING_TYPE_SCALAR = "meeting_type_scalar"
ROLE_LOAD = "role_load"
EMOTIONAL_LOAD = "emotional_load"
SOCIAL_LOAD = "social_load"
TOPIC_CHANGE_COST = "topic_change_cost"
GAP_DAMPENER = "gap_dampener"
TIME_OF_DAY_MULTIPLIER = "time_of_day_multiplier"

# Fallbacks for labels outside the known enumerations
DEFAULT_COMPLEXITY = 0.3
DEFAULT_SCALAR = 1.0
DEFAULT_ROLE_LOAD = 0.5
DEFAULT_EMOTIONAL_LOAD = 0.4
DEFAULT_TIME_OF_DAY_MULTIPLIER = 1.0


def _frozen(values: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(values))


def _labels(enum_cls: type[Enum], values: Mapping[Enum, float]) -> Mapping[str, float]:
    missing = [member for member in enum_cls if member not in values]
    if missing:
        raise ValueError(f"Missing weights for {enum_cls.__name__}: {missing}")
    return _frozen({member.value: weight for member, weight in values.items()})


@dataclass(frozen=True)
class Bucket:
    """One interval of a bucketed dimension. ``upper`` is inclusive; None is open-ended."""

    label: str
    upper: float | None
    weight: float


SOCIAL_LOAD_BUCKETS = (
    Bucket("1-2", 2, 0.2),
    Bucket("3-5", 5, 0.4),
    Bucket("6-10", 10, 0.6),
    Bucket("11-20", 20, 0.8),
    Bucket("20+", None, 1.0),
)

GAP_DAMPENER_BUCKETS = (
    Bucket("0-5", 5, 1.0),
    Bucket("5-15", 15, 0.8),
    Bucket("15-30", 30, 0.5),
    Bucket("30+", None, 0.2),
)


@dataclass(frozen=True)
class WeightTable:
    """
    Immutable mapping from categorical labels to numeric weights.

    Lookups never fail: an unknown label resolves to the caller's default.
    """

    meeting_type: Mapping[str, float]
    meeting_type_scalar: Mapping[str, float]
    role_load: Mapping[str, float]
    emotional_load: Mapping[str, float]
    topic_change_cost: Mapping[str, float]
    time_of_day_multiplier: Mapping[str, float]
    social_load: tuple[Bucket, ...] = SOCIAL_LOAD_BUCKETS
    gap_dampener: tuple[Bucket, ...] = GAP_DAMPENER_BUCKETS
    _categories: Mapping[str, Mapping[str, float]] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in ("social_load", "gap_dampener"):
            buckets = getattr(self, name)
            if not buckets or buckets[-1].upper is not None:
                raise ValueError(f"{name} must end with an open-ended bucket")
        categories = {
            MEETING_TYPE: _frozen(self.meeting_type),
            MEETING_TYPE_SCALAR: _frozen(self.meeting_type_scalar),
            ROLE_LOAD: _frozen(self.role_load),
            EMOTIONAL_LOAD: _frozen(self.emotional_load),
            TOPIC_CHANGE_COST: _frozen(self.topic_change_cost),
            TIME_OF_DAY_MULTIPLIER: _frozen(self.time_of_day_multiplier),
            SOCIAL_LOAD: _frozen({b.label: b.weight for b in self.social_load}),
            GAP_DAMPENER: _frozen({b.label: b.weight for b in self.gap_dampener}),
        }
        object.__setattr__(self, "_categories", MappingProxyType(categories))

    def lookup(self, category: str, label: str | Enum | None, default: float) -> float:
        """Weight for ``label`` within ``category``, or ``default`` if unknown."""
        table = self._categories.get(category)
        if table is None:
            return default
        if isinstance(label, Enum):
            label = label.value
        if not isinstance(label, str):
            return default
        return table.get(label, default)

    def complexity(self, meeting_type: str | None) -> float:
        return self.lookup(MEETING_TYPE, meeting_type, DEFAULT_COMPLEXITY)

    def scalar(self, meeting_type: str | None) -> float:
        return self.lookup(MEETING_TYPE_SCALAR, meeting_type, DEFAULT_SCALAR)

    def role(self, role: str | None) -> float:
        return self.lookup(ROLE_LOAD, role, DEFAULT_ROLE_LOAD)

    def emotional(self, intensity: str | None) -> float:
        return self.lookup(EMOTIONAL_LOAD, intensity, DEFAULT_EMOTIONAL_LOAD)

    def topic_cost(self, change: TopicChange) -> float:
        return self.lookup(TOPIC_CHANGE_COST, change, 1.0)

    def time_of_day(self, bucket: TimeOfDay) -> float:
        return self.lookup(TIME_OF_DAY_MULTIPLIER, bucket, DEFAULT_TIME_OF_DAY_MULTIPLIER)

    def to_dict(self) -> dict[str, dict[str, float]]:
        """Plain-dict copy of every category, for inspection."""
        return {category: dict(table) for category, table in self._categories.items()}


DEFAULT_WEIGHTS = WeightTable(
    meeting_type=_labels(
        MeetingType,
        {
            MeetingType.STANDUP: 0.2,
            MeetingType.STATUS: 0.3,
            MeetingType.DEMO: 0.4,
            MeetingType.PLANNING: 0.6,
            MeetingType.BRAINSTORMING: 0.7,
            MeetingType.DESIGN_REVIEW: 0.8,
            MeetingType.DECISION: 0.9,
            MeetingType.CONFLICT: 1.0,
            MeetingType.SYNC: 0.15,
            MeetingType.SOCIAL: 0.05,
        },
    ),
    meeting_type_scalar=_labels(
        MeetingType,
        {
            MeetingType.STANDUP: 1.0,
            MeetingType.STATUS: 1.0,
            MeetingType.DEMO: 1.0,
            MeetingType.PLANNING: 1.0,
            MeetingType.BRAINSTORMING: 1.0,
            MeetingType.DESIGN_REVIEW: 1.0,
            MeetingType.DECISION: 1.0,
            MeetingType.CONFLICT: 1.0,
            MeetingType.SYNC: 0.3,
            MeetingType.SOCIAL: 0.12,
        },
    ),
    role_load=_labels(
        Role,
        {
            Role.LISTENER: 0.3,
            Role.OCCASIONAL_CONTRIBUTOR: 0.5,
            Role.CONTRIBUTOR: 0.8,
            Role.DECISION_MAKER: 1.0,
        },
    ),
    emotional_load=_labels(
        EmotionalIntensity,
        {
            EmotionalIntensity.ROUTINE: 0.2,
            EmotionalIntensity.EXTERNAL: 0.4,
            EmotionalIntensity.FEEDBACK: 0.6,
            EmotionalIntensity.PERFORMANCE: 0.8,
            EmotionalIntensity.CONFLICT: 1.0,
        },
    ),
    topic_change_cost=_labels(
        TopicChange,
        {
            TopicChange.SAME_PROJECT: 0.0,
            TopicChange.RELATED_DOMAIN: 0.3,
            TopicChange.DIFFERENT_DOMAIN: 0.7,
            TopicChange.UNRELATED: 1.0,
        },
    ),
    time_of_day_multiplier=_labels(
        TimeOfDay,
        {
            TimeOfDay.MORNING: 1.0,
            TimeOfDay.MIDDAY: 1.1,
            TimeOfDay.AFTERNOON: 1.2,
            TimeOfDay.EVENING: 1.4,
        },
    ),
)


def social_load_for(attendees: int, weights: WeightTable = DEFAULT_WEIGHTS) -> float:
    """Social load bucket for an attendee count."""
    return _bucket_weight(weights.social_load, attendees)


def gap_dampener_for(gap_minutes: float, weights: WeightTable = DEFAULT_WEIGHTS) -> float:
    """Dampener applied to topic cost for the idle gap before a meeting."""
    return _bucket_weight(weights.gap_dampener, gap_minutes)


def _bucket_weight(buckets: tuple[Bucket, ...], value: float) -> float:
    for bucket in buckets:
        if bucket.upper is None or value <= bucket.upper:
            return bucket.weight
    return buckets[-1].weight


def time_of_day_for(hour: int) -> TimeOfDay:
    """Time-of-day bucket for an hour (0-23)."""
    if hour < 12:
        return TimeOfDay.MORNING
    if hour < 15:
        return TimeOfDay.MIDDAY
    if hour < 18:
        return TimeOfDay.AFTERNOON
    return TimeOfDay.EVENING

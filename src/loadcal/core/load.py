"""Per-meeting load scoring and the capacity fold - no I/O dependencies."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from itertools import accumulate
from typing import Iterable, Sequence

from .meetings import ClassifiedMeeting
from .weights import (
    DEFAULT_WEIGHTS,
    TimeOfDay,
    TopicChange,
    WeightTable,
    gap_dampener_for,
    social_load_for,
    time_of_day_for,
)

MIN_DURATION_MINUTES = 15
FULL_CAPACITY = 100.0
RECOVERY_MINUTES_PER_LOAD = 20

# Mental load factor weights: complexity > role = emotion > social
COMPLEXITY_WEIGHT = 0.35
ROLE_WEIGHT = 0.25
EMOTIONAL_WEIGHT = 0.25
SOCIAL_WEIGHT = 0.15

_MILLI = Decimal("0.001")


def clamp(value: float) -> float:
    """
    Round half-up to 3 decimal places, then restrict to [0, 1].

    Rounds the exact binary value, so 0.1725 (stored just below) gives 0.172.
    """
    rounded = float(Decimal(value).quantize(_MILLI, rounding=ROUND_HALF_UP))
    return max(0.0, min(1.0, rounded))


@dataclass(frozen=True)
class Explanation:
    """Every intermediate weight behind a meeting's score."""

    complexity: float
    role_load: float
    emotional_load: float
    social_load: float
    mental_load: float
    meeting_type_scalar: float
    context_switch_cost: float
    time_of_day_multiplier: float
    topic_tags: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "complexity": self.complexity,
            "roleLoad": self.role_load,
            "emotionalLoad": self.emotional_load,
            "socialLoad": self.social_load,
            "mentalLoad": self.mental_load,
            "meetingTypeScalar": self.meeting_type_scalar,
            "contextSwitchCost": self.context_switch_cost,
            "timeOfDayMultiplier": self.time_of_day_multiplier,
            "topicTags": list(self.topic_tags),
        }


@dataclass(frozen=True)
class MeetingLoad:
    """Scores for one meeting before the capacity fold is applied."""

    meeting: ClassifiedMeeting
    duration_minutes: float
    mental_load: float
    context_switch_cost: float
    total_load: float
    recovery_minutes: float
    time_of_day: TimeOfDay
    social_load: float
    capacity_cost: float
    explanation: Explanation


@dataclass(frozen=True)
class EnrichedMeeting:
    """A classified meeting with its load scores and capacity snapshot."""

    meeting: ClassifiedMeeting
    duration_minutes: float
    mental_load: float
    context_switch_cost: float
    total_load: float
    recovery_minutes: float
    time_of_day: TimeOfDay
    social_load: float
    capacity_cost: float
    capacity_remaining: float
    explanation: Explanation

    @classmethod
    def from_load(cls, load: MeetingLoad, capacity_remaining: float) -> "EnrichedMeeting":
        return cls(
            meeting=load.meeting,
            duration_minutes=load.duration_minutes,
            mental_load=load.mental_load,
            context_switch_cost=load.context_switch_cost,
            total_load=load.total_load,
            recovery_minutes=load.recovery_minutes,
            time_of_day=load.time_of_day,
            social_load=load.social_load,
            capacity_cost=load.capacity_cost,
            capacity_remaining=capacity_remaining,
            explanation=load.explanation,
        )

    def to_dict(self) -> dict:
        """Serialize as the input meeting plus computed fields (camelCase)."""
        data = self.meeting.to_dict()
        data.update(
            {
                "durationMinutes": self.duration_minutes,
                "mentalLoad": self.mental_load,
                "contextSwitchCost": self.context_switch_cost,
                "totalLoad": self.total_load,
                "recoveryMinutes": round(self.recovery_minutes, 3),
                "timeOfDay": self.time_of_day.value,
                "socialLoad": self.social_load,
                "capacityCost": round(self.capacity_cost, 3),
                "capacityRemaining": round(self.capacity_remaining, 3),
                "explanation": self.explanation.to_dict(),
            }
        )
        return data


def context_switch_cost(
    current: ClassifiedMeeting,
    previous: ClassifiedMeeting | None,
    weights: WeightTable = DEFAULT_WEIGHTS,
) -> float:
    """
    Cost of switching into ``current`` from the meeting right before it.

    Only overlap vs. no overlap of topic tags is distinguished: shared tags
    cost as a related-domain switch, disjoint tags as an unrelated one.
    """
    if previous is None:
        return 0.0

    if current.classification.shares_topic_with(previous.classification):
        topic_cost = weights.topic_cost(TopicChange.RELATED_DOMAIN)
    else:
        topic_cost = weights.topic_cost(TopicChange.UNRELATED)

    gap_minutes = max(0.0, (current.start - previous.end).total_seconds() / 60)
    return clamp(topic_cost * gap_dampener_for(gap_minutes, weights))


def compute_meeting_load(
    meeting: ClassifiedMeeting,
    previous: ClassifiedMeeting | None = None,
    weights: WeightTable = DEFAULT_WEIGHTS,
) -> MeetingLoad:
    """
    Score a single meeting.

    Pure function - no I/O. ``previous`` is the meeting immediately before
    this one in the day, or None for the first meeting.
    """
    labels = meeting.classification
    duration_minutes = max(MIN_DURATION_MINUTES, meeting.raw_duration_minutes())

    complexity = weights.complexity(labels.meeting_type)
    role_load = weights.role(labels.role)
    emotional_load = weights.emotional(labels.emotional_intensity)
    social_load = social_load_for(meeting.attendee_count, weights)

    mental_load_raw = (duration_minutes / 60) * (
        COMPLEXITY_WEIGHT * complexity
        + ROLE_WEIGHT * role_load
        + EMOTIONAL_WEIGHT * emotional_load
        + SOCIAL_WEIGHT * social_load
    )
    scalar = weights.scalar(labels.meeting_type)
    mental_load = clamp(mental_load_raw * scalar)

    switch_cost = context_switch_cost(meeting, previous, weights)
    total_load = clamp(mental_load + switch_cost)

    time_of_day = time_of_day_for(meeting.start.hour)
    multiplier = weights.time_of_day(time_of_day)

    return MeetingLoad(
        meeting=meeting,
        duration_minutes=duration_minutes,
        mental_load=mental_load,
        context_switch_cost=switch_cost,
        total_load=total_load,
        recovery_minutes=total_load * RECOVERY_MINUTES_PER_LOAD * multiplier,
        time_of_day=time_of_day,
        social_load=social_load,
        capacity_cost=total_load * 100,
        explanation=Explanation(
            complexity=complexity,
            role_load=role_load,
            emotional_load=emotional_load,
            social_load=social_load,
            mental_load=mental_load,
            meeting_type_scalar=scalar,
            context_switch_cost=switch_cost,
            time_of_day_multiplier=multiplier,
            topic_tags=labels.topic_tags,
        ),
    )


def fold_capacity(costs: Iterable[float], capacity: float = FULL_CAPACITY) -> list[float]:
    """Running capacity after each cost, never increasing and floored at 0."""
    return list(accumulate(costs, lambda remaining, cost: max(0.0, remaining - cost), initial=capacity))[1:]


def compute_event_loads(
    meetings: Sequence[ClassifiedMeeting],
    weights: WeightTable = DEFAULT_WEIGHTS,
) -> list[EnrichedMeeting]:
    """
    Score a day's meetings left to right.

    Pass 1 scores each meeting against its predecessor; pass 2 folds the
    capacity costs. Meetings must already be sorted by start time.
    """
    loads = [
        compute_meeting_load(meeting, meetings[i - 1] if i else None, weights)
        for i, meeting in enumerate(meetings)
    ]
    remaining = fold_capacity(load.capacity_cost for load in loads)
    return [EnrichedMeeting.from_load(load, capacity) for load, capacity in zip(loads, remaining)]

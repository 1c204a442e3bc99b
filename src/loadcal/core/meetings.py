"""Classified meeting domain model - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime


class InvalidTimestamp(ValueError):
    """Raised when a meeting timestamp cannot be parsed into an aware instant."""

    pass


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    Accepts a trailing "Z". Naive values are rejected rather than guessed,
    since a wrong offset would shift every duration and gap after it.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidTimestamp(f"Unparseable timestamp: {value!r}") from e
    else:
        raise InvalidTimestamp(f"Unparseable timestamp: {value!r}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise InvalidTimestamp(f"Timestamp has no UTC offset: {value!r}")
    return parsed


@dataclass(frozen=True)
class Classification:
    """Labels assigned to a meeting by the external classifier."""

    meeting_type: str
    role: str
    emotional_intensity: str
    topic_tags: tuple[str, ...] = ()

    def shares_topic_with(self, other: "Classification") -> bool:
        """True if any topic tag matches exactly (case-sensitive)."""
        return not set(self.topic_tags).isdisjoint(other.topic_tags)

    def to_dict(self) -> dict:
        return {
            "meeting_type": self.meeting_type,
            "role": self.role,
            "emotional_intensity": self.emotional_intensity,
            "topic_tags": list(self.topic_tags),
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "Classification":
        """Labels from the wire shape. Anything but a dict gives empty labels."""
        if not isinstance(data, dict):
            data = {}
        tags = data.get("topic_tags") or []
        if isinstance(tags, str):
            tags = [tags]
        return cls(
            meeting_type=str(data.get("meeting_type", "")),
            role=str(data.get("role", "")),
            emotional_intensity=str(data.get("emotional_intensity", "")),
            topic_tags=tuple(str(t) for t in tags),
        )


@dataclass(frozen=True)
class ClassifiedMeeting:
    """A calendar meeting with its classification attached."""

    id: str
    title: str
    start: datetime
    end: datetime
    attendee_count: int
    classification: Classification
    description: str = ""
    extra: dict = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        for name in ("start", "end"):
            value = getattr(self, name)
            if value.tzinfo is None or value.utcoffset() is None:
                raise InvalidTimestamp(f"Meeting {self.id!r} has a naive {name} timestamp")
        if self.attendee_count < 0:
            object.__setattr__(self, "attendee_count", 0)

    def raw_duration_minutes(self) -> float:
        """Recorded duration in minutes; may be zero or negative."""
        return (self.end - self.start).total_seconds() / 60

    def to_dict(self) -> dict:
        """Serialize to the wire shape accepted by from_dict()."""
        data = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "title": self.title,
                "description": self.description,
                "start": self.start.isoformat(),
                "end": self.end.isoformat(),
                "attendeeCount": self.attendee_count,
                "classification": self.classification.to_dict(),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ClassifiedMeeting":
        """
        Build from the wire shape:

            {id, title, description, start, end, attendeeCount,
             classification: {meeting_type, role, emotional_intensity, topic_tags}}

        Unknown keys are kept in ``extra`` and echoed back on output.
        """
        known = {"id", "title", "description", "start", "end", "attendeeCount", "classification"}
        start = parse_timestamp(data.get("start"))
        end = parse_timestamp(data.get("end"))
        attendees = data.get("attendeeCount")
        try:
            attendee_count = int(attendees) if attendees else 1
        except (TypeError, ValueError):
            attendee_count = 1

        return cls(
            id=str(data.get("id") or int(start.timestamp() * 1000)),
            title=data.get("title") or "Untitled Meeting",
            description=data.get("description") or "",
            start=start,
            end=end,
            attendee_count=attendee_count,
            classification=Classification.from_dict(data.get("classification") or {}),
            extra={k: v for k, v in data.items() if k not in known},
        )

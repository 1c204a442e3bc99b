"""Pure helpers around the external meeting classifier - no I/O dependencies."""

import json
import re

from .meetings import Classification
from .weights import EmotionalIntensity, MeetingType, Role

CLASSIFICATION_PROMPT = """You are classifying work meetings for cognitive load estimation.

Use ONLY the allowed values.

Meeting details:
Title: {title}
Description: {description}
Attendees: {attendee_count}
User role: {user_role}

Return JSON with:
- meeting_type: one of [{meeting_types}]
- role: one of [{roles}]
- emotional_intensity: one of [{intensities}]
- topic_tags: up to 3 short tags

Guidance:
- Use "social" for birthdays, celebrations, team bonding, or non-work gatherings.
- Use "sync" for routine project syncs, weekly check-ins, or coordination meetings.

Respond with JSON only. No explanations. Do not wrap the response in backticks or code fences.
Return only the JSON object and nothing else. Any additional text will break the system."""

MAX_TOPIC_TAGS = 3

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"```$")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "meeting_type": {"type": "STRING", "enum": _values(MeetingType)},
        "role": {"type": "STRING", "enum": _values(Role)},
        "emotional_intensity": {"type": "STRING", "enum": _values(EmotionalIntensity)},
        "topic_tags": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["meeting_type", "role", "emotional_intensity", "topic_tags"],
}


def build_classification_prompt(event: dict) -> str:
    """Fill the classification prompt for a raw calendar event."""
    return CLASSIFICATION_PROMPT.format(
        title=event.get("title", ""),
        description=event.get("description") or "",
        attendee_count=event.get("attendeeCount", 1),
        user_role=event.get("userRole") or Role.CONTRIBUTOR.value,
        meeting_types=", ".join(_values(MeetingType)),
        roles=", ".join(_values(Role)),
        intensities=", ".join(_values(EmotionalIntensity)),
    )


def topic_tags_from_title(title: str) -> list[str]:
    """First three lower-cased alphanumeric words of a title."""
    words = [_NON_ALNUM.sub("", word) for word in (title or "").lower().split()]
    return [w for w in words if w][:MAX_TOPIC_TAGS] or ["general"]


def fallback_classification(event: dict) -> Classification:
    """Classification from the event's own hints, or neutral defaults."""
    return Classification(
        meeting_type=event.get("meetingType") or MeetingType.STATUS.value,
        role=event.get("userRole") or Role.CONTRIBUTOR.value,
        emotional_intensity=event.get("emotionalIntensity") or EmotionalIntensity.ROUTINE.value,
        topic_tags=tuple(event.get("topicTags") or ["general"]),
    )


def _extract_json_block(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def parse_classification_output(text: str) -> Classification | None:
    """
    Parse model output into a Classification.

    Tolerates code fences and surrounding prose. Returns None when the
    output is not JSON or lacks any of the three label fields.
    """
    cleaned = _FENCE_END.sub("", _FENCE_START.sub("", (text or "").strip())).strip()
    candidate = _extract_json_block(cleaned) or cleaned

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    if not (parsed.get("meeting_type") and parsed.get("role") and parsed.get("emotional_intensity")):
        return None

    tags = parsed.get("topic_tags")
    return Classification(
        meeting_type=str(parsed["meeting_type"]),
        role=str(parsed["role"]),
        emotional_intensity=str(parsed["emotional_intensity"]),
        topic_tags=tuple(str(t) for t in tags) if isinstance(tags, list) else (),
    )


def should_retry(text: str) -> bool:
    """True when output looks truncated: an opening brace with no closing one."""
    trimmed = (text or "").strip()
    if not trimmed:
        return False
    return "{" in trimmed and "}" not in trimmed


def apply_title_overrides(title: str, classification: Classification) -> Classification:
    """Force obviously social or routine-sync meetings to their categories."""
    lowered = (title or "").lower()

    if "birthday" in lowered or "celebration" in lowered:
        meeting_type = MeetingType.SOCIAL
    elif "sync" in lowered or "check-in" in lowered or "check in" in lowered:
        meeting_type = MeetingType.SYNC
    else:
        return classification

    return Classification(
        meeting_type=meeting_type.value,
        role=classification.role,
        emotional_intensity=EmotionalIntensity.ROUTINE.value,
        topic_tags=classification.topic_tags,
    )

"""Pure logic for answering questions about a day's load - no I/O dependencies."""

import json

MAX_PROMPT_EVENTS = 10


def fallback_answer(query: str, summary: dict | None) -> str:
    """
    Canned answer for when no language model is available.

    Matches a few question shapes by keyword; otherwise comments on risk.
    """
    normalized = query.lower()
    summary = summary or {}
    capacity = summary.get("capacityRemaining", 100)
    total_load = summary.get("totalLoad", 0)

    if "how heavy" in normalized:
        return (
            f"Your day is at {round(total_load * 100)} percent load. "
            f"You have {round(capacity)} capacity units left. "
            "Remember, you don't have time, you have capacity."
        )

    if "move" in normalized:
        return (
            "Yes, moving a high-load meeting later can protect your recovery buffer. "
            "Look for a slot with more capacity."
        )

    if "why" in normalized:
        return (
            "That meeting is expensive because the mental demand, emotional intensity, "
            "and context switching costs stack up. "
            "I can show the exact baseline factors in the explanation panel."
        )

    if summary.get("highRisk"):
        return "Today is a higher burnout risk. Consider adding recovery buffers or reducing context switches."

    return (
        "I'm here to help you protect your capacity. "
        "Ask about today's load, moving meetings, or why a meeting is costly."
    )


def format_event_line(event: dict) -> str:
    """One prompt line per scored meeting."""
    classification = event.get("classification") or {}

    def value(data: dict, key: str, missing: str = "n/a"):
        found = data.get(key)
        return missing if found is None or found == "" else found

    return " | ".join(
        [
            f"title={event.get('title') or 'Untitled'}",
            f"start={event.get('start') or 'unknown start'}",
            f"end={event.get('end') or 'unknown end'}",
            f"mentalLoad={value(event, 'mentalLoad')}",
            f"totalLoad={value(event, 'totalLoad')}",
            f"recoveryMinutes={value(event, 'recoveryMinutes')}",
            f"meeting_type={value(classification, 'meeting_type')}",
            f"role={value(classification, 'role')}",
            f"emotional_intensity={value(classification, 'emotional_intensity')}",
        ]
    )


def build_coach_prompt(query: str, summary: dict | None, events: list[dict] | None) -> str:
    """Prompt for a short, supportive answer grounded in the scored day."""
    events_md = "\n".join(format_event_line(e) for e in (events or [])[:MAX_PROMPT_EVENTS])
    summary_json = json.dumps(summary or {})
    return f"""You are a calm, supportive calendar coach.
Use the calendar summary and events to answer the user's question.
If the data is insufficient, say what is missing.
Keep the response to 1-2 sentences.

Calendar summary JSON: {summary_json}
Upcoming events (max {MAX_PROMPT_EVENTS}):
{events_md}

User question: {query}"""

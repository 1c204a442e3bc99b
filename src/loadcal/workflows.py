"""Shared workflow layer for the CLI.

Loads meetings, classifies them with the LLM (or fallbacks), runs the
scoring core, and answers questions about the scored day.
"""

import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from zoneinfo import ZoneInfo

import requests
from google.auth.exceptions import GoogleAuthError

from .adapters.elevenlabs import ElevenLabsSpeech
from .adapters.gemini import GeminiService
from .adapters.google_calendar import GoogleCalendarAdapter
from .adapters.token_store import FileTokenStore
from .config import Config
from .core.classification import (
    RESPONSE_SCHEMA,
    apply_title_overrides,
    build_classification_prompt,
    fallback_classification,
    parse_classification_output,
    should_retry,
)
from .core.coach import build_coach_prompt, fallback_answer
from .core.meetings import Classification, ClassifiedMeeting, parse_timestamp
from .core.summary import DayReport, score_day
from .core.weights import DEFAULT_WEIGHTS, WeightTable
from .ports.calendar_repo import CalendarRepository
from .ports.llm_service import LLMRequestError, LLMService
from .ports.speech_service import SpeechResult, SpeechService
from .ports.token_store import TokenStore

logger = logging.getLogger(__name__)

# Remote failures that degrade to fallbacks instead of aborting the day
LLM_ERRORS = (RuntimeError, requests.RequestException, GoogleAuthError)


def get_llm(config: Config) -> GeminiService | None:
    """Gemini service when Vertex AI is configured, else None."""
    if not config.gemini_configured:
        return None
    return GeminiService(
        project_id=config.gcp_project_id,
        location=config.gcp_location,
        model=config.gemini_model,
    )


def get_speech(config: Config) -> ElevenLabsSpeech:
    return ElevenLabsSpeech(
        api_key=config.elevenlabs_api_key,
        voice_id=config.elevenlabs_voice_id,
        model_id=config.elevenlabs_model,
    )


def get_calendar(config: Config, token_store: TokenStore | None = None) -> GoogleCalendarAdapter:
    """Calendar adapter backed by the given token store (file store by default)."""
    return GoogleCalendarAdapter(
        token_store=token_store or FileTokenStore(config.google_token_file),
        calendar_id=config.calendar_id,
        client_secret_file=config.google_client_secret_file,
        timezone_name=config.timezone,
    )


# ============== Classification ==============


def _retry_classification(llm: LLMService, prompt: str, title: str) -> str:
    """Second, deterministic attempt. Returns "" on any remote failure."""
    try:
        return llm.generate(prompt, temperature=0, max_output_tokens=128, response_schema=RESPONSE_SCHEMA)
    except LLM_ERRORS as e:
        logger.error(f"Gemini retry failed for {title!r}: {e}")
        return ""


def classify_event(event: dict, llm: LLMService | None, debug: bool = False) -> Classification:
    """
    Classify one raw meeting.

    Falls back to the event's own hints when the model is unavailable,
    fails, or returns unusable output. Never raises for remote failures.

    Title overrides apply to parsed output and to fallbacks after a failed
    call, but not when the model is unconfigured or rejects the request.
    """
    title = event.get("title", "")
    if llm is None:
        logger.warning("Gemini not configured; using fallback classification.")
        return fallback_classification(event)

    prompt = build_classification_prompt(event)
    try:
        text = llm.generate(prompt, temperature=0.2, max_output_tokens=256, response_schema=RESPONSE_SCHEMA)
    except LLMRequestError as e:
        logger.warning(f"Gemini rejected classification for {title!r}: {e}; using fallback classification.")
        return fallback_classification(event)
    except LLM_ERRORS as e:
        logger.error(f"Gemini classification failed for {title!r}: {e}")
        return apply_title_overrides(title, fallback_classification(event))

    if debug:
        logger.info(f"Gemini raw response for {title!r}: {text}")

    classification = parse_classification_output(text)
    if classification is None and should_retry(text):
        logger.info(f"Retrying truncated classification for {title!r}")
        classification = parse_classification_output(_retry_classification(llm, prompt, title))

    if classification is None:
        logger.warning(f"Unusable classification for {title!r}; using fallback classification.")
        classification = fallback_classification(event)

    classification = apply_title_overrides(title, classification)
    if debug:
        logger.info(f"Gemini classification for {title!r}: {classification}")
    return classification


def classify_events(
    events: list[dict],
    llm: LLMService | None,
    max_workers: int = 4,
    debug: bool = False,
) -> list[ClassifiedMeeting]:
    """
    Classify raw meetings concurrently, keeping input order.

    Events that already carry a classification are used as-is.
    """

    def _classify(event: dict) -> ClassifiedMeeting:
        existing = event.get("classification")
        if existing and isinstance(existing, dict):
            return ClassifiedMeeting.from_dict(event)
        classification = classify_event(event, llm, debug)
        return ClassifiedMeeting.from_dict({**event, "classification": classification.to_dict()})

    if not events:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(events)))) as pool:
        return list(pool.map(_classify, events))


def sort_events(events: list[dict]) -> list[dict]:
    """Sort raw meetings by start. Raises InvalidTimestamp on bad input."""
    return sorted(events, key=lambda e: parse_timestamp(e.get("start")))


def build_report(
    events: list[dict],
    config: Config,
    llm: LLMService | None = None,
    weights: WeightTable = DEFAULT_WEIGHTS,
) -> DayReport:
    """Sort, classify and score a day's raw meetings."""
    ordered = sort_events(events)
    classified = classify_events(ordered, llm, config.classify_workers, config.gemini_debug)
    tz = ZoneInfo(config.timezone) if config.timezone else None
    return score_day(classified, weights, tz)


def load_events_file(path: Path | str) -> list[dict]:
    """Read meetings from JSON: either a list or an object with "events"."""
    if str(path) == "-":
        data = json.load(sys.stdin)
    else:
        data = json.loads(Path(path).read_text())

    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise ValueError("Expected a JSON list of meetings or an object with an 'events' list")
    return data


def fetch_day_report(
    config: Config,
    target_date: date | None = None,
    calendar: CalendarRepository | None = None,
    llm: LLMService | None = None,
) -> DayReport:
    """Fetch a day from the calendar, then classify and score it."""
    calendar = calendar or get_calendar(config)
    events = calendar.fetch_day(target_date or date.today())
    return build_report(events, config, llm)


# ============== Questions ==============


@dataclass
class CoachAnswer:
    """Answer to a question about the day, with optional audio."""

    text: str
    warning: str = ""
    audio: SpeechResult | None = None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "audio": self.audio.to_dict() if self.audio else None,
            "warning": self.warning,
        }


def answer_query(
    query: str,
    summary: dict | None,
    events: list[dict] | None,
    llm: LLMService | None,
) -> CoachAnswer:
    """Answer a question with the LLM, or a canned answer plus a warning."""
    if llm is None:
        return CoachAnswer(
            text=fallback_answer(query, summary),
            warning="Gemini is not configured. Set GCP_PROJECT_ID and GCP_LOCATION.",
        )

    prompt = build_coach_prompt(query, summary, events)
    try:
        text = llm.generate(prompt, temperature=0.3, max_output_tokens=200)
    except LLM_ERRORS as e:
        logger.error(f"Gemini voice response failed: {e}")
        return CoachAnswer(
            text=fallback_answer(query, summary),
            warning="Gemini request failed. Check Vertex AI API and credentials.",
        )

    if not text or not text.strip():
        return CoachAnswer(
            text=fallback_answer(query, summary),
            warning="Gemini returned no content. Check model and request format.",
        )
    return CoachAnswer(text=text.strip())


def ask(
    query: str,
    report: dict,
    llm: LLMService | None,
    speech: SpeechService | None = None,
) -> CoachAnswer:
    """Answer a question about a scored day, speaking the answer if possible."""
    if not query or not query.strip():
        raise ValueError("Missing query.")
    answer = answer_query(query, report.get("summary"), report.get("events"), llm)
    if speech is not None:
        answer.audio = speech.synthesize(answer.text)
    return answer

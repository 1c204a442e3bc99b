"""Ports - interfaces/protocols for external dependencies."""

from .calendar_repo import CalendarRepository
from .llm_service import LLMService
from .speech_service import SpeechResult, SpeechService
from .token_store import TokenStore

__all__ = [
    "CalendarRepository",
    "LLMService",
    "SpeechResult",
    "SpeechService",
    "TokenStore",
]

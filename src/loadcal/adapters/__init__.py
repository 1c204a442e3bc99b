"""Adapters - I/O implementations of ports."""

from .google_calendar import AuthenticationError, GoogleCalendarAdapter
from .gemini import GeminiService
from .elevenlabs import ElevenLabsSpeech
from .token_store import FileTokenStore, MemoryTokenStore

__all__ = [
    "AuthenticationError",
    "GoogleCalendarAdapter",
    "GeminiService",
    "ElevenLabsSpeech",
    "FileTokenStore",
    "MemoryTokenStore",
]

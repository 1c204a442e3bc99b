"""Text-to-speech service interface."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class SpeechResult:
    """Outcome of a synthesis request: "ok", "skipped" or "error"."""

    status: str
    audio_base64: str = ""
    reason: str = ""
    details: str = ""

    def to_dict(self) -> dict:
        data = {"status": self.status}
        if self.audio_base64:
            data["audioBase64"] = self.audio_base64
        if self.reason:
            data["reason"] = self.reason
        if self.details:
            data["details"] = self.details
        return data


class SpeechService(Protocol):
    """Interface for converting response text to audio."""

    def synthesize(self, text: str) -> SpeechResult:
        """Synthesize speech. Never raises for remote failures."""
        ...

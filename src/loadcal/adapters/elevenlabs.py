"""ElevenLabs adapter - forwards response text to text-to-speech."""

import base64
import logging

import requests

from loadcal.ports.speech_service import SpeechResult

logger = logging.getLogger(__name__)

API_BASE = "https://api.elevenlabs.io/v1"


class ElevenLabsSpeech:
    """
    ElevenLabs text-to-speech adapter.

    Implements SpeechService protocol. Failures come back as results,
    never as exceptions, so a spoken answer is optional.
    """

    def __init__(
        self,
        api_key: str,
        voice_id: str,
        model_id: str = "eleven_multilingual_v2",
        session: requests.Session | None = None,
        timeout: int = 30,
    ):
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.timeout = timeout
        self._session = session or requests.Session()

    def synthesize(self, text: str) -> SpeechResult:
        if not self.api_key or not self.voice_id:
            return SpeechResult(status="skipped", reason="Missing ElevenLabs credentials.")

        try:
            resp = self._session.post(
                f"{API_BASE}/text-to-speech/{self.voice_id}",
                headers={
                    "xi-api-key": self.api_key,
                    "Content-Type": "application/json",
                    "Accept": "audio/mpeg",
                },
                json={
                    "text": text,
                    "model_id": self.model_id,
                    "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"ElevenLabs request failed: {e}")
            return SpeechResult(status="error", reason="ElevenLabs request failed.", details=str(e))

        if not resp.ok:
            logger.error(f"ElevenLabs error: {resp.status_code} {resp.text}")
            return SpeechResult(
                status="error",
                reason=f"ElevenLabs request failed ({resp.status_code}).",
                details=resp.text,
            )

        return SpeechResult(status="ok", audio_base64=base64.b64encode(resp.content).decode("ascii"))

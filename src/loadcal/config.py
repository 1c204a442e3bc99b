"""Configuration management for loadcal."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

LOADCAL_HOME = Path(os.environ.get("LOADCAL_HOME", Path.home() / ".loadcal"))
CONFIG_FILE = LOADCAL_HOME / "config" / "loadcal.conf"
TOKEN_FILE = LOADCAL_HOME / "config" / "google-token.json"


@dataclass
class Config:
    """loadcal configuration."""

    # Empty timezone keeps each timestamp's own offset for time-of-day buckets
    timezone: str = ""
    calendar_id: str = "primary"
    google_client_secret_file: str = ""
    google_token_file: str = str(TOKEN_FILE)
    # Vertex AI / Gemini
    gcp_project_id: str = ""
    gcp_location: str = ""
    gemini_model: str = "gemini-1.5-flash"
    gemini_debug: bool = False
    # ElevenLabs text-to-speech
    elevenlabs_api_key: str = ""
    elevenlabs_voice_id: str = ""
    elevenlabs_model: str = "eleven_multilingual_v2"
    classify_workers: int = 4

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gcp_project_id and self.gcp_location)

    @property
    def speech_configured(self) -> bool:
        return bool(self.elevenlabs_api_key and self.elevenlabs_voice_id)


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith(('"', "'")):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply(config: Config, key: str, value: str) -> None:
    match key:
        case "timezone":
            config.timezone = value
        case "calendar_id":
            config.calendar_id = value or "primary"
        case "google_client_secret_file":
            config.google_client_secret_file = value
        case "google_token_file":
            config.google_token_file = value
        case "gcp_project_id":
            config.gcp_project_id = value
        case "gcp_location":
            config.gcp_location = value
        case "gemini_model":
            config.gemini_model = value or config.gemini_model
        case "gemini_debug":
            config.gemini_debug = _parse_bool(value)
        case "elevenlabs_api_key":
            config.elevenlabs_api_key = value
        case "elevenlabs_voice_id":
            config.elevenlabs_voice_id = value
        case "elevenlabs_model":
            config.elevenlabs_model = value or config.elevenlabs_model
        case "classify_workers":
            try:
                config.classify_workers = max(1, int(value))
            except ValueError:
                logger.warning(f"Ignoring invalid CLASSIFY_WORKERS value: {value!r}")
        case _:
            logger.debug(f"Unknown config key: {key}")


KNOWN_KEYS = (
    "timezone",
    "calendar_id",
    "google_client_secret_file",
    "google_token_file",
    "gcp_project_id",
    "gcp_location",
    "gemini_model",
    "gemini_debug",
    "elevenlabs_api_key",
    "elevenlabs_voice_id",
    "elevenlabs_model",
    "classify_workers",
)


def load_config(
    config_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load configuration from loadcal.conf, then environment overrides.

    The file holds KEY=value lines; environment variables use the same
    upper-case names and win over the file.
    """
    config = Config()
    config_file = config_file or CONFIG_FILE
    environ = os.environ if environ is None else environ

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            _apply(config, key.strip().lower(), _unquote(value.strip()))

    for key in KNOWN_KEYS:
        value = environ.get(key.upper())
        if value is not None:
            _apply(config, key, value.strip())

    return config

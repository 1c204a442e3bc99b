"""Gemini (Vertex AI) adapter - HTTP client for text generation."""

import logging

import requests

from ..ports.llm_service import LLMRequestError

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
ENDPOINT = (
    "https://{location}-aiplatform.googleapis.com/v1/projects/{project}"
    "/locations/{location}/publishers/google/models/{model}:generateContent"
)


class GeminiService:
    """
    Vertex AI generateContent adapter.

    Implements LLMService protocol. Uses application default credentials
    unless credentials are passed in.
    """

    def __init__(
        self,
        project_id: str,
        location: str,
        model: str = "gemini-1.5-flash",
        credentials=None,
        session: requests.Session | None = None,
        timeout: int = 30,
    ):
        self.project_id = project_id
        self.location = location
        self.model = model
        self.timeout = timeout
        self._credentials = credentials
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return ENDPOINT.format(location=self.location, project=self.project_id, model=self.model)

    def _access_token(self) -> str:
        """Current OAuth access token, refreshing credentials when stale."""
        import google.auth
        from google.auth.transport.requests import Request

        if self._credentials is None:
            self._credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        if not self._credentials.valid:
            self._credentials.refresh(Request())
        return self._credentials.token

    def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_output_tokens: int = 256,
        response_schema: dict | None = None,
    ) -> str:
        """Generate text from a prompt. Returns complete response."""
        generation_config = {"temperature": temperature, "maxOutputTokens": max_output_tokens}
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema

        resp = self._session.post(
            self.endpoint,
            headers={
                "Authorization": f"Bearer {self._access_token()}",
                "Content-Type": "application/json",
            },
            json={
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": generation_config,
            },
            timeout=self.timeout,
        )

        if resp.status_code != 200:
            logger.error(f"Gemini request failed: {resp.status_code} {resp.reason} {resp.text}")
            raise LLMRequestError(f"Gemini request failed ({resp.status_code})")

        data = resp.json()
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            return ""

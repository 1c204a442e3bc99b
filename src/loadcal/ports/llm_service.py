"""LLM service interface."""

from typing import Protocol


class LLMRequestError(RuntimeError):
    """The service answered, but with an error status."""

    pass


class LLMService(Protocol):
    """Interface for LLM text generation."""

    def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_output_tokens: int = 256,
        response_schema: dict | None = None,
    ) -> str:
        """
        Generate text from a prompt. Returns the complete response.

        Raises LLMRequestError when the service rejects the request.
        """
        ...

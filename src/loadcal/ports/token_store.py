"""OAuth token storage interface."""

from typing import Protocol


class TokenStore(Protocol):
    """Caller-owned handle for persisted OAuth tokens."""

    def load(self) -> str | None:
        """Return the authorized-user JSON, or None if nothing is stored."""
        ...

    def save(self, token_json: str) -> None:
        """Store authorized-user JSON, replacing any previous value."""
        ...

    def clear(self) -> None:
        """Forget stored tokens."""
        ...

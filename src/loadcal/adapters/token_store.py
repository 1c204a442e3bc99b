"""Token storage adapters."""

from pathlib import Path


class FileTokenStore:
    """
    File-based token storage.

    Implements TokenStore protocol. The file is readable by the owner only.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        content = self.path.read_text()
        return content or None

    def save(self, token_json: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token_json)
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class MemoryTokenStore:
    """In-process token storage. Implements TokenStore protocol."""

    def __init__(self, token_json: str | None = None):
        self._token_json = token_json

    def load(self) -> str | None:
        return self._token_json

    def save(self, token_json: str) -> None:
        self._token_json = token_json

    def clear(self) -> None:
        self._token_json = None

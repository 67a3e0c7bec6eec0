"""Token persistence for the client.

Learn: Only the token is persisted, never the user object. The user is
always re-fetched from /auth/verify at startup, so a stale profile can't
outlive the token that vouched for it.
"""

import os
from pathlib import Path
from typing import Optional

DEFAULT_TOKEN_FILE = "~/.config/taskboard/token"


class TokenStore:
    """Where a client keeps its bearer token between runs."""

    def load(self) -> Optional[str]:
        raise NotImplementedError

    def save(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStore(TokenStore):
    """Keeps the token for the life of the object (tests, one-shot scripts)."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """Token in a user-only readable file (TASKBOARD_TOKEN_FILE)."""

    def __init__(self, path: Optional[str | Path] = None):
        raw = path or os.environ.get("TASKBOARD_TOKEN_FILE", DEFAULT_TOKEN_FILE)
        self.path = Path(raw).expanduser()

    def load(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

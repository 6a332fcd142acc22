"""Client-local persistence for the voting session id."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SESSION_STORAGE_KEY = "harleyVotingSession"


class SessionStore(Protocol):
    """Storage interface for the single persisted session id."""

    def load(self) -> str | None:
        """Return the stored session id, if any."""

    def save(self, session_id: str) -> None:
        """Persist the session id, replacing any previous value."""


@dataclass
class JsonFileSessionStore(SessionStore):
    """Session store backed by a small JSON file."""

    path: Path

    def __post_init__(self) -> None:
        self.path = Path(self.path).expanduser()

    def load(self) -> str | None:
        """Read the session id; unreadable or corrupt files count as empty."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.warning("Could not read session file", extra={"path": str(self.path)})
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt session file", extra={"path": str(self.path)})
            return None
        value = data.get(SESSION_STORAGE_KEY) if isinstance(data, dict) else None
        if isinstance(value, str) and value:
            return value
        return None

    def save(self, session_id: str) -> None:
        """Write the session id to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({SESSION_STORAGE_KEY: session_id}), encoding="utf-8"
        )

"""Anonymous per-installation session identity.

The identifier stands in for a user account: it marks which notes a visitor
created and which notes they like. It is generated once, kept in local
storage, and never verified by the server.
"""

import json
import secrets
import string
import time
from collections.abc import Iterator, MutableMapping
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

SESSION_KEY = "coffee-notes-session-id"
_ALPHABET = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Return ``user_<epoch millis>_<13 random base36 chars>``."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(13))
    return f"user_{int(time.time() * 1000)}_{suffix}"


class JsonFileStorage(MutableMapping[str, str]):
    """String key/value storage persisted to a JSON file, like browser local storage.

    A missing or unreadable file reads as empty storage. Every write rewrites the file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path.expanduser()

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("session_storage_unreadable", path=str(self.path), error=str(exc))
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def __getitem__(self, key: str) -> str:
        return self._load()[key]

    def __setitem__(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def __delitem__(self, key: str) -> None:
        data = self._load()
        del data[key]
        self._save(data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._load())

    def __len__(self) -> int:
        return len(self._load())


class SessionIdentityProvider:
    """Reads the session ID from storage, creating and storing one on first use."""

    def __init__(self, storage: MutableMapping[str, str] | None) -> None:
        self._storage = storage

    def get_or_create_session_id(self) -> str:
        """Return the persisted session ID, or "" when there is no storage to persist it in."""
        if self._storage is None:
            return ""
        session_id = self._storage.get(SESSION_KEY)
        if not session_id:
            session_id = generate_session_id()
            self._storage[SESSION_KEY] = session_id
            logger.info("session_created", session_id=session_id)
        return session_id

"""Identity context for the assistant client.

Two values identify a client:

- the user id, persisted in durable storage (a JSON file) so it survives
  restarts;
- the session id, kept in transient storage that lives only as long as the
  process (the terminal counterpart of a browser tab).

The conversation and directory receive an ``IdentityContext`` explicitly
instead of reaching for module globals.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

USER_ID_KEY = "shop_user_id"
SESSION_ID_KEY = "shop_session_id"


class DurableStorage:
    """String key/value store backed by a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable client state at {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> bool:
        """Store a value.

        Returns:
            False if the state file could not be written.
        """
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write client state to {self.path}: {e}")
            return False
        return True


class TransientStorage:
    """In-memory store scoped to one client process."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class IdentityContext:
    """User and session identity for one client instance.

    Args:
        durable: Storage for the user id.
        transient: Storage for the current session id. Defaults to a fresh
            in-memory store.
    """

    def __init__(
        self,
        durable: DurableStorage,
        transient: Optional[TransientStorage] = None,
    ):
        self.durable = durable
        self.transient = transient if transient is not None else TransientStorage()

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "IdentityContext":
        return cls(DurableStorage(path))

    @property
    def user_id(self) -> Optional[str]:
        return self.durable.get(USER_ID_KEY)

    def remember_user(self, user_id: str) -> bool:
        """Persist a user id.

        Returns:
            True if the stored value changed.
        """
        if not user_id or user_id == self.user_id:
            return False
        if not self.durable.set(USER_ID_KEY, user_id):
            return False
        logger.info(f"Stored user id {user_id}")
        return True

    @property
    def session_id(self) -> Optional[str]:
        return self.transient.get(SESSION_ID_KEY)

    def bind_session(self, session_id: Optional[str]) -> None:
        """Record the active session id, or clear it when None."""
        if session_id:
            self.transient.set(SESSION_ID_KEY, session_id)
        else:
            self.transient.remove(SESSION_ID_KEY)

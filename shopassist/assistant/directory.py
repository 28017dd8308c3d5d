"""Session directory for the assistant client.

Lists the bound user's previous sessions and forwards selection and
new-session intents to the conversation. Fetch failures are logged and leave
the current list untouched; nothing here raises to the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from shopassist.assistant.client import ProxyRequestError, ShopAssistClient
from shopassist.assistant.conversation import ConversationController
from shopassist.assistant.history import sessions_from_payload
from shopassist.assistant.identity import IdentityContext
from shopassist.assistant.models import Session

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"


@dataclass(frozen=True)
class SessionEntry:
    """One row of the directory as displayed."""

    session_id: str
    label: str
    updated: str
    is_current: bool


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_relative_time(
    value: Union[str, datetime], now: Optional[datetime] = None
) -> str:
    """Format a timestamp relative to ``now``.

    Under a minute is "Just now", then "{m}m ago", "{h}h ago" and "{d}d ago"
    (all floored). From seven days on, the local date is shown instead.

    Example:
        >>> now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        >>> format_relative_time("2024-05-01T11:55:00", now=now)
        '5m ago'
    """
    timestamp = parse_timestamp(value)
    now = now or datetime.now(timezone.utc)
    elapsed = (now - timestamp).total_seconds()

    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return timestamp.astimezone().strftime("%x")


class SessionDirectory:
    """Session list for the bound user.

    Args:
        client: Proxy client used to list sessions.
        identity: Source of the user id.
        conversation: Receives selection and new-session intents.
    """

    def __init__(
        self,
        client: ShopAssistClient,
        identity: IdentityContext,
        conversation: ConversationController,
    ):
        self.client = client
        self.identity = identity
        self.conversation = conversation
        self.user_id: Optional[str] = None
        self.sessions: List[Session] = []
        self.state = LoadState.EMPTY
        self.overlay_open = False

    def set_user(self, user_id: Optional[str]) -> None:
        """Bind the directory to a user, fetching when the user changes."""
        if not user_id or user_id == self.user_id:
            return
        self.user_id = user_id
        self.load()

    def sync_identity(self) -> None:
        """Pick up the user id from the identity context."""
        self.set_user(self.identity.user_id)

    def refresh(self, user_id: Optional[str] = None) -> None:
        """External refresh signal, optionally naming the user to show."""
        if user_id:
            self.user_id = user_id
        self.load()

    def load(self) -> None:
        if not self.user_id:
            return

        self.state = LoadState.LOADING
        try:
            data = self.client.list_sessions(self.user_id)
        except ProxyRequestError as e:
            logger.error(f"Failed to load sessions: {e}")
            data = None

        sessions = sessions_from_payload(data)
        if sessions is not None:
            self.sessions = sessions
        self.state = LoadState.LOADED if self.sessions else LoadState.EMPTY

    def entries(self, now: Optional[datetime] = None) -> List[SessionEntry]:
        entries = []
        for session in self.sessions:
            try:
                updated = format_relative_time(session.updated_at, now=now)
            except ValueError:
                updated = ""
            entries.append(
                SessionEntry(
                    session_id=session.id,
                    label=session.label,
                    updated=updated,
                    is_current=session.id == self.conversation.current_session_id,
                )
            )
        return entries

    def open_overlay(self) -> None:
        self.overlay_open = True

    def select(self, session_id: str) -> None:
        self.conversation.select_session(session_id)
        self.overlay_open = False

    def new_session(self) -> None:
        self.conversation.new_session()
        self.overlay_open = False

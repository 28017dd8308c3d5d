r"""Conversation state machine for the assistant client.

``ConversationController`` owns the ordered message list of the active
session and the pointer to that session. Sends are optimistic: the user
message is appended before the proxy answers, and any failure becomes a fixed
apology from the assistant rather than an exception.

Send states::

    IDLE --send--> SENDING --ok--> IDLE
                          \--fail--> ERROR --> IDLE

Binding states are NO_SESSION (``current_session_id is None``) and
ACTIVE_SESSION.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from shopassist.assistant.client import ProxyRequestError, ShopAssistClient
from shopassist.assistant.history import (
    APOLOGY_REPLY,
    history_from_payload,
    new_message_id,
    parse_chat_reply,
)
from shopassist.assistant.identity import IdentityContext
from shopassist.assistant.models import Message

# Configure module logger
logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class SendState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    ERROR = "error"


class Binding(str, Enum):
    NO_SESSION = "no_session"
    ACTIVE_SESSION = "active_session"


StateListener = Callable[[SendState], None]
UserListener = Callable[[str], None]


class ConversationController:
    """Message list and session binding for one client.

    Args:
        client: Proxy client used for sends, history and feedback.
        identity: Identity context; its session id (if any) is the initially
            bound session and is kept in sync with every rebinding.
        on_user_discovered: Called with the new user id when a send reveals
            a user id different from the stored one. The session directory
            uses it to refresh.
    """

    def __init__(
        self,
        client: ShopAssistClient,
        identity: IdentityContext,
        on_user_discovered: Optional[UserListener] = None,
    ):
        self.client = client
        self.identity = identity
        self.on_user_discovered = on_user_discovered
        self.current_session_id: Optional[str] = identity.session_id
        self.send_state = SendState.IDLE
        self._messages: List[Message] = []
        self._state_listeners: List[StateListener] = []

    @property
    def messages(self) -> List[Message]:
        """Messages of the active session in append order (a copy)."""
        return list(self._messages)

    @property
    def binding(self) -> Binding:
        if self.current_session_id is None:
            return Binding.NO_SESSION
        return Binding.ACTIVE_SESSION

    @property
    def is_sending(self) -> bool:
        return self.send_state is SendState.SENDING

    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def _set_state(self, state: SendState) -> None:
        self.send_state = state
        for listener in self._state_listeners:
            listener(state)

    def _bind(self, session_id: Optional[str]) -> None:
        self.current_session_id = session_id
        self.identity.bind_session(session_id)

    def _load_history(self, session_id: str) -> List[Message]:
        try:
            data = self.client.get_session_messages(session_id)
        except ProxyRequestError as e:
            logger.error(f"Failed to load session messages for {session_id}: {e}")
            return []
        return history_from_payload(data)

    def initialize(self) -> None:
        """Load the history of a restored session, or start empty."""
        if self.current_session_id is None:
            self._messages = []
            return
        self._messages = self._load_history(self.current_session_id)
        logger.info(
            f"Restored session {self.current_session_id} "
            f"with {len(self._messages)} messages"
        )

    def send(self, text: str) -> Optional[Message]:
        """Send user text and append the assistant's answer.

        Ignored (returns None) when the text is blank or a send is already in
        flight.

        Args:
            text: The user's message.

        Returns:
            The assistant message that was appended: the reply on success,
            the apology on failure.
        """
        if not text or not text.strip() or self.is_sending:
            return None

        self._messages.append(Message(id=new_message_id(), role="user", content=text))
        self._set_state(SendState.SENDING)

        try:
            try:
                data = self.client.send_message(text, self.current_session_id)
            except ProxyRequestError as e:
                logger.error(f"Failed to send message: {e}")
                reply = Message(
                    id=new_message_id(), role="assistant", content=APOLOGY_REPLY
                )
                self._messages.append(reply)
                self._set_state(SendState.ERROR)
                return reply

            parsed = parse_chat_reply(data)

            if parsed.session_id and self.current_session_id is None:
                self._bind(parsed.session_id)
                logger.info(f"Bound new session {parsed.session_id}")

            reply = Message(
                id=new_message_id(),
                role="assistant",
                content=parsed.content,
                products=parsed.products,
            )
            self._messages.append(reply)

            if parsed.user_id and self.identity.remember_user(parsed.user_id):
                if self.on_user_discovered is not None:
                    self.on_user_discovered(parsed.user_id)

            return reply
        finally:
            self._set_state(SendState.IDLE)

    def select_session(self, session_id: str) -> None:
        """Switch to an existing session and replace the list with its history."""
        self._bind(session_id)
        self._messages = []
        self._messages = self._load_history(session_id)

    def new_session(self) -> None:
        """Start a new, unsaved session. Does not contact the proxy."""
        self._bind(None)
        self._messages = []

    def rate_product(
        self,
        message_id: str,
        product_id: str,
        rating: int,
        reasons: Optional[List[str]] = None,
        reason_text: Optional[str] = None,
    ) -> bool:
        """Submit feedback on a product recommended in this session.

        The user query sent along is the user message right before the
        assistant message being rated.

        Returns:
            True if the proxy accepted the feedback.

        Raises:
            ValueError: If the rating is outside 1-5.
        """
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"rating must be between {MIN_RATING} and {MAX_RATING}")

        if self.current_session_id is None:
            logger.warning("Cannot rate a product before the session is saved")
            return False

        try:
            self.client.submit_feedback(
                self.current_session_id,
                message_id,
                product_id,
                rating,
                reasons=reasons,
                reason_text=reason_text,
                user_query=self._query_for(message_id),
                feedback_type="product_rating",
            )
        except ProxyRequestError as e:
            logger.error(f"Failed to submit feedback for product {product_id}: {e}")
            return False
        return True

    def _query_for(self, message_id: str) -> Optional[str]:
        previous = None
        for message in self._messages:
            if message.id == message_id:
                return previous
            if message.role == "user":
                previous = message.content
        return None

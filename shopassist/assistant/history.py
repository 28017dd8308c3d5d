"""Pure transformations from proxy payloads to client models.

Nothing in this module performs I/O. Malformed payloads never raise here:
missing or wrongly typed fields are replaced by safe defaults, so the
conversation and directory can treat "bad data" like "no data".
"""

import logging
import uuid
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from shopassist.assistant.models import ChatReply, Message, Product, Session

# Configure module logger
logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I understand. How can I help you find products?"
APOLOGY_REPLY = "Sorry, I encountered an error. Please try again."


def new_message_id() -> str:
    """Return a fresh id for a locally created message."""
    return str(uuid.uuid4())


def parse_products(raw: Any) -> List[Product]:
    """Parse a remote product list.

    Args:
        raw: Value of a ``products`` field; anything that is not a list
            yields an empty list.

    Returns:
        Products in their original order. Entries that fail validation are
        dropped.
    """
    if not isinstance(raw, list):
        return []

    products = []
    for index, item in enumerate(raw):
        try:
            products.append(Product.model_validate(item))
        except ValidationError as e:
            logger.warning(
                f"Dropping malformed product at position {index}",
                extra={"errors": e.error_count()},
            )
    return products


def parse_chat_reply(data: Any) -> ChatReply:
    """Parse the proxy's send response into a ``ChatReply``.

    ``assistantResponse`` falls back to ``FALLBACK_REPLY`` when absent or not
    a string; ``sessionId``/``userId`` are kept only when non-empty strings.
    """
    if not isinstance(data, dict):
        data = {}

    content = data.get("assistantResponse")
    if not isinstance(content, str):
        content = FALLBACK_REPLY

    return ChatReply(
        session_id=_optional_str(data.get("sessionId")),
        user_id=_optional_str(data.get("userId")),
        content=content,
        products=parse_products(data.get("products")),
    )


def flatten_history(records: Iterable[Any]) -> List[Message]:
    """Flatten paired history records into an ordered message list.

    Each record ``{id, user_content, assistant_content, products}`` becomes
    exactly two messages, user first, with ids ``user-<id>`` and
    ``assistant-<id>``. The record's products (or an empty list) attach to the
    assistant message only.

    Args:
        records: Paired records in remote order.

    Returns:
        List of 2N messages for N well-formed records, alternating
        user/assistant in record order.

    Example:
        >>> msgs = flatten_history([{"id": 1, "user_content": "hi",
        ...                          "assistant_content": "hello"}])
        >>> [m.id for m in msgs]
        ['user-1', 'assistant-1']
    """
    messages: List[Message] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning(f"Skipping malformed history record: {record!r}")
            continue

        record_id = record.get("id")
        messages.append(
            Message(
                id=f"user-{record_id}",
                role="user",
                content=_text(record.get("user_content")),
            )
        )
        messages.append(
            Message(
                id=f"assistant-{record_id}",
                role="assistant",
                content=_text(record.get("assistant_content")),
                products=parse_products(record.get("products")),
            )
        )
    return messages


def history_from_payload(data: Any) -> List[Message]:
    """Flatten the ``messages`` field of a history response.

    A payload without a ``messages`` list flattens to an empty history.
    """
    if isinstance(data, dict) and isinstance(data.get("messages"), list):
        return flatten_history(data["messages"])
    return []


def sessions_from_payload(data: Any) -> Optional[List[Session]]:
    """Parse a session-list response.

    Returns:
        The parsed sessions, or None when the payload has no ``sessions``
        list so the caller can keep whatever it already shows.
    """
    if not isinstance(data, dict) or not isinstance(data.get("sessions"), list):
        return None

    sessions = []
    for item in data["sessions"]:
        try:
            sessions.append(Session.model_validate(item))
        except ValidationError:
            logger.warning(f"Skipping malformed session entry: {item!r}")
    return sessions


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)

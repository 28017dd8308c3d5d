"""Relay endpoints for the ShopAssist proxy.

Each endpoint validates the inbound request and forwards it to the matching
remote assistant API endpoint. Remote payloads are returned verbatim; remote
failures surface through the app's ``ShopAssistException`` handler as a
generic 500.
"""

import logging
from typing import Any, List, Optional, Union

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictFloat, StrictInt, field_validator

from shopassist.api.upstream import RemoteAssistantAPI, get_remote_api

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/api/shop",
    tags=["shop"],
)

MIN_RATING = 1
MAX_RATING = 5


class CreateMessageRequest(BaseModel):
    """Request body for sending a chat message.

    Attributes:
        sessionId: Remote session to continue; omitted for a new session.
        message: The user's text.
    """

    sessionId: Optional[str] = Field(default=None, description="Existing session id")
    message: str = Field(..., description="User message text")


class FeedbackRequest(BaseModel):
    """Request body for rating a recommended product."""

    sessionId: str
    messageID: str
    productId: str
    rating: Union[StrictInt, StrictFloat] = Field(..., description="Rating from 1 to 5")
    reason: Optional[List[str]] = None
    reason_text: Optional[str] = None
    user_query: Optional[str] = None
    feedback_type: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def rating_in_range(cls, value: Union[int, float]) -> Union[int, float]:
        if not MIN_RATING <= value <= MAX_RATING:
            raise ValueError(f"rating must be between {MIN_RATING} and {MAX_RATING}")
        return value


def _passthrough(data: Any) -> JSONResponse:
    return JSONResponse(content=data)


@router.post("/message")
async def send_message(
    payload: CreateMessageRequest,
    remote: RemoteAssistantAPI = Depends(get_remote_api),
) -> JSONResponse:
    """Relay a chat message to the remote assistant.

    Expected remote response shape:
    ``{sessionId?, userId?, assistantResponse?, products?}``. It is returned
    unchanged.

    Example:
        POST /api/shop/message {"message": "running shoes under 3000"}
    """
    logger.info(
        "Relaying chat message",
        extra={"has_session": payload.sessionId is not None},
    )
    data = await remote.send_message(payload.message, payload.sessionId)
    return _passthrough(data)


@router.get("/sessions/messages/{session_id}")
async def get_session_messages(
    session_id: str,
    remote: RemoteAssistantAPI = Depends(get_remote_api),
) -> JSONResponse:
    """Relay a session's paired message history.

    Expected remote response shape:
    ``{messages: [{id, user_content, assistant_content, products}]}``.
    """
    data = await remote.get_session_messages(session_id)
    return _passthrough(data)


@router.get("/sessions/{user_id}")
async def list_sessions(
    user_id: str,
    remote: RemoteAssistantAPI = Depends(get_remote_api),
) -> JSONResponse:
    """Relay the list of sessions for a user.

    Expected remote response shape: ``{sessions: [{id, created_at, updated_at}]}``.
    """
    data = await remote.list_sessions(user_id)
    return _passthrough(data)


@router.post("/feedback")
async def submit_feedback(
    payload: FeedbackRequest,
    remote: RemoteAssistantAPI = Depends(get_remote_api),
) -> JSONResponse:
    """Relay product feedback. Fields the caller left unset are not forwarded."""
    logger.info(
        "Relaying product feedback",
        extra={"product_id": payload.productId, "rating": payload.rating},
    )
    data = await remote.submit_feedback(payload.model_dump(exclude_none=True))
    return _passthrough(data)

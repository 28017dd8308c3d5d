"""Async client for the remote assistant API.

The proxy never interprets remote payloads: every method returns the decoded
JSON body as-is. Transport failures and non-success statuses are raised as
``ShopAssistException`` subclasses carrying the route's public error message.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from shopassist.api.exceptions import UpstreamStatusError, UpstreamUnavailableError
from shopassist.api.metrics import relay_metrics

logger = logging.getLogger(__name__)

# Public error messages, one per relay route
SEND_MESSAGE_ERROR = "Failed to send message"
LIST_SESSIONS_ERROR = "Failed to fetch sessions"
SESSION_MESSAGES_ERROR = "Failed to fetch session messages"
FEEDBACK_ERROR = "Failed to submit feedback"


class RemoteAssistantAPI:
    """Thin wrapper over ``httpx.AsyncClient`` for the remote endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    # -- Low-level helper --

    async def _relay(
        self,
        route: str,
        error_message: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Any:
        """Issue one request and return the decoded JSON body.

        No retries: the first failure is final.
        """
        url = f"{self.base_url}{path}"
        start_time = time.perf_counter()
        ok = False
        try:
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                raise UpstreamUnavailableError(error_message, url=url, error=e) from e

            if not response.is_success:
                raise UpstreamStatusError(
                    error_message,
                    url=url,
                    remote_status=response.status_code,
                    reason=response.reason_phrase,
                )

            try:
                data = json.loads(response.content, parse_constant=_reject_constant)
            except ValueError as e:
                raise UpstreamStatusError(
                    error_message,
                    url=url,
                    remote_status=response.status_code,
                    reason=f"invalid JSON body: {e}",
                ) from e

            ok = True
            return data
        finally:
            latency_ms = (time.perf_counter() - start_time) * 1000
            relay_metrics.record_relay(route, latency_ms, ok)
            logger.debug(
                f"Relayed {method} {path}",
                extra={"route": route, "ok": ok, "latency_ms": round(latency_ms, 2)},
            )

    # -- Relay endpoints --

    async def send_message(self, message: str, session_id: Optional[str] = None) -> Any:
        """Forward a chat message as multipart form fields."""
        fields: Dict[str, Any] = {}
        if session_id:
            fields["sessionId"] = (None, session_id)
        fields["message"] = (None, message)
        return await self._relay(
            "message", SEND_MESSAGE_ERROR, "POST", "/api/chat/message", files=fields
        )

    async def list_sessions(self, user_id: str) -> Any:
        """List the sessions the remote API holds for a user."""
        return await self._relay(
            "sessions", LIST_SESSIONS_ERROR, "GET", f"/api/sessions/user/{user_id}"
        )

    async def get_session_messages(self, session_id: str) -> Any:
        """Fetch the paired message history of one session."""
        return await self._relay(
            "session_messages",
            SESSION_MESSAGES_ERROR,
            "GET",
            f"/api/sessions/messages/{session_id}",
        )

    async def submit_feedback(self, feedback: Dict[str, Any]) -> Any:
        """Forward product feedback as a JSON body."""
        return await self._relay(
            "feedback", FEEDBACK_ERROR, "POST", "/api/feedback/product", json=feedback
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def get_remote_api(request: Request) -> RemoteAssistantAPI:
    """Provide the app's shared remote API client to route handlers."""
    return request.app.state.remote_api

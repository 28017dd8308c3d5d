"""HTTP binding from the assistant client to the ShopAssist proxy.

``ShopAssistClient`` returns raw decoded JSON. Interpreting the payloads is
left to ``shopassist.assistant.history``. Any failure, whether transport,
non-2xx status or undecodable body, is raised as ``ProxyRequestError`` and
never retried.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ProxyRequestError(Exception):
    """Raised when a call to the proxy fails for any reason."""

    def __init__(self, operation: str, error: str, status_code: Optional[int] = None):
        super().__init__(f"{operation} failed: {error}")
        self.operation = operation
        self.error = error
        self.status_code = status_code


class ShopAssistClient:
    """Synchronous client for the proxy's ``/api/shop`` routes."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def _call(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ProxyRequestError(operation, f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise ProxyRequestError(
                operation,
                _error_text(response),
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProxyRequestError(
                operation, "response is not JSON", status_code=response.status_code
            ) from e

    def send_message(self, message: str, session_id: Optional[str] = None) -> Any:
        body: Dict[str, Any] = {"message": message}
        if session_id:
            body["sessionId"] = session_id
        return self._call("send message", "POST", "/message", json=body)

    def list_sessions(self, user_id: str) -> Any:
        return self._call("list sessions", "GET", f"/sessions/{user_id}")

    def get_session_messages(self, session_id: str) -> Any:
        return self._call(
            "get session messages", "GET", f"/sessions/messages/{session_id}"
        )

    def submit_feedback(
        self,
        session_id: str,
        message_id: str,
        product_id: str,
        rating: int,
        reasons: Optional[List[str]] = None,
        reason_text: Optional[str] = None,
        user_query: Optional[str] = None,
        feedback_type: Optional[str] = None,
    ) -> Any:
        body: Dict[str, Any] = {
            "sessionId": session_id,
            "messageID": message_id,
            "productId": product_id,
            "rating": rating,
        }
        optional = {
            "reason": reasons,
            "reason_text": reason_text,
            "user_query": user_query,
            "feedback_type": feedback_type,
        }
        body.update({key: value for key, value in optional.items() if value is not None})
        return self._call("submit feedback", "POST", "/feedback", json=body)

    def close(self) -> None:
        self._client.close()


def _error_text(response: httpx.Response) -> str:
    """Extract the proxy's ``{"error": ...}`` message, or fall back to the status."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return f"HTTP {response.status_code}"

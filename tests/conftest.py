"""Shared fixtures for the ShopAssist tests."""

from typing import Any, Dict, List, Optional

import pytest

from shopassist.api.metrics import relay_metrics
from shopassist.assistant.client import ProxyRequestError
from shopassist.assistant.identity import IdentityContext


class StubProxyClient:
    """In-memory stand-in for ``ShopAssistClient``.

    Replies are configured per call; any operation named in ``failing``
    raises ``ProxyRequestError`` like the real client does.
    """

    def __init__(self):
        self.reply: Any = {}
        self.histories: Dict[str, Any] = {}
        self.sessions: Dict[str, Any] = {}
        self.failing: set = set()
        self.sent: List[tuple] = []
        self.history_calls: List[str] = []
        self.session_calls: List[str] = []
        self.feedback: List[Dict[str, Any]] = []
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failing:
            raise ProxyRequestError(operation, "Internal error", status_code=500)

    def send_message(self, message: str, session_id: Optional[str] = None) -> Any:
        self.sent.append((message, session_id))
        self._maybe_fail("send")
        return self.reply

    def list_sessions(self, user_id: str) -> Any:
        self.session_calls.append(user_id)
        self._maybe_fail("sessions")
        return self.sessions.get(user_id, {"sessions": []})

    def get_session_messages(self, session_id: str) -> Any:
        self.history_calls.append(session_id)
        self._maybe_fail("history")
        return self.histories.get(session_id, {"messages": []})

    def submit_feedback(self, session_id, message_id, product_id, rating, **kwargs) -> Any:
        self._maybe_fail("feedback")
        self.feedback.append(
            {
                "session_id": session_id,
                "message_id": message_id,
                "product_id": product_id,
                "rating": rating,
                **kwargs,
            }
        )
        return {"status": "ok"}

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def stub_client() -> StubProxyClient:
    return StubProxyClient()


@pytest.fixture
def identity(tmp_path) -> IdentityContext:
    """Identity context backed by a throwaway state file."""
    return IdentityContext.from_path(tmp_path / "client_state.json")


@pytest.fixture
def sample_product() -> Dict[str, Any]:
    return {
        "id": "p-1",
        "title": "Trail Running Shoes",
        "price": 2999.0,
        "discounted_price": 2499.0,
        "url": "https://shop.example.com/p-1",
        "image": "https://shop.example.com/p-1.jpg",
        "description": "Lightweight shoes with grippy soles.",
        "brand": "Stride",
        "category": "footwear",
        "score": 0.92,
        "rank": 1,
    }


@pytest.fixture(autouse=True)
def reset_metrics():
    relay_metrics.reset()
    yield
    relay_metrics.reset()

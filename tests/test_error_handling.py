"""Tests for error handling in the ShopAssist proxy.

Any remote failure, whatever its status code, must surface as the fixed
``{"error": ...}`` payload with status 500 and no remote detail.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from shopassist.api.main import app
from shopassist.api.upstream import RemoteAssistantAPI, get_remote_api

REMOTE_BASE = "https://remote.example.com"

# Create test client
client = TestClient(app)


def use_remote(handler) -> None:
    api = RemoteAssistantAPI(REMOTE_BASE, transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_remote_api] = lambda: api


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.mark.parametrize("remote_status", [400, 401, 404, 422, 500, 502, 503])
def test_remote_status_always_maps_to_generic_500(remote_status):
    """Test that every non-2xx remote status becomes the same error shape."""
    use_remote(
        lambda request: httpx.Response(
            remote_status, json={"detail": "secret remote detail"}
        )
    )

    response = client.post("/api/shop/message", json={"message": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send message"}


@pytest.mark.parametrize(
    "method, path, body, expected",
    [
        ("POST", "/api/shop/message", {"message": "hi"}, "Failed to send message"),
        ("GET", "/api/shop/sessions/u-1", None, "Failed to fetch sessions"),
        ("GET", "/api/shop/sessions/messages/s-1", None, "Failed to fetch session messages"),
        (
            "POST",
            "/api/shop/feedback",
            {"sessionId": "s", "messageID": "m", "productId": "p", "rating": 5},
            "Failed to submit feedback",
        ),
    ],
)
def test_each_route_has_its_own_error_message(method, path, body, expected):
    """Test that the error message names the failed operation."""
    use_remote(lambda request: httpx.Response(502))

    response = client.request(method, path, json=body)

    assert response.status_code == 500
    assert response.json() == {"error": expected}


def test_transport_failure_maps_to_generic_500():
    """Test that connection errors are reported like remote errors."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    use_remote(refuse)

    response = client.get("/api/shop/sessions/u-1")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch sessions"}


def test_non_json_remote_body_maps_to_generic_500():
    """Test that an undecodable success body is treated as a failure."""
    use_remote(lambda request: httpx.Response(200, text="<html>ngrok error</html>"))

    response = client.post("/api/shop/message", json={"message": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send message"}


def test_failures_are_counted_in_status():
    """Test that failed relays are recorded as failures."""
    use_remote(lambda request: httpx.Response(500))

    client.post("/api/shop/message", json={"message": "hi"})
    client.post("/api/shop/message", json={"message": "again"})

    data = client.get("/status").json()
    assert data["routes"]["message"]["calls"] == 2
    assert data["routes"]["message"]["failures"] == 2
    assert data["relay_failures"] == 2


def test_no_retry_on_failure():
    """Test that a failed relay calls the remote exactly once."""
    calls = []

    def failing(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    use_remote(failing)

    client.post("/api/shop/message", json={"message": "hi"})

    assert len(calls) == 1


def test_health_check_not_affected_by_remote_errors():
    """Test that /ping works while the remote API is failing."""
    use_remote(lambda request: httpx.Response(500))

    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize("body", [b'{"x": NaN}', b'{"x": Infinity}', b'{"x": -Infinity}'])
def test_non_finite_numbers_map_to_generic_500(body):
    """Test that remote bodies with NaN or Infinity get the JSON error shape."""
    use_remote(
        lambda request: httpx.Response(
            200, content=body, headers={"content-type": "application/json"}
        )
    )

    response = client.get("/api/shop/sessions/u-1")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch sessions"}

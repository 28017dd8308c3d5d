"""Tests for the proxy HTTP client."""

import json

import httpx
import pytest

from shopassist.assistant.client import ProxyRequestError, ShopAssistClient

PROXY_BASE = "http://proxy.test/api/shop"


def make_client(handler) -> ShopAssistClient:
    return ShopAssistClient(PROXY_BASE, transport=httpx.MockTransport(handler))


def test_send_message_posts_json():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"assistantResponse": "hi"})

    client = make_client(handler)

    assert client.send_message("hello", "s-1") == {"assistantResponse": "hi"}
    assert seen[0].url == f"{PROXY_BASE}/message"
    assert json.loads(seen[0].content) == {"message": "hello", "sessionId": "s-1"}


def test_send_message_without_session():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={})

    make_client(handler).send_message("hello")

    assert seen == [{"message": "hello"}]


def test_read_paths():
    urls = []

    def handler(request):
        urls.append(str(request.url))
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.list_sessions("u-1")
    client.get_session_messages("s-1")

    assert urls == [f"{PROXY_BASE}/sessions/u-1", f"{PROXY_BASE}/sessions/messages/s-1"]


def test_feedback_body_omits_unset_fields():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"status": "ok"})

    make_client(handler).submit_feedback("s-1", "m-1", "p-1", 4, reason_text="too pricey")

    assert bodies == [
        {
            "sessionId": "s-1",
            "messageID": "m-1",
            "productId": "p-1",
            "rating": 4,
            "reason_text": "too pricey",
        }
    ]


def test_error_status_raises_with_proxy_message():
    client = make_client(lambda request: httpx.Response(500, json={"error": "Failed to send message"}))

    with pytest.raises(ProxyRequestError) as excinfo:
        client.send_message("hello")

    assert excinfo.value.status_code == 500
    assert excinfo.value.error == "Failed to send message"


def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ProxyRequestError) as excinfo:
        make_client(handler).list_sessions("u-1")

    assert excinfo.value.status_code is None


def test_non_json_body_raises():
    client = make_client(lambda request: httpx.Response(200, text="oops"))

    with pytest.raises(ProxyRequestError):
        client.get_session_messages("s-1")

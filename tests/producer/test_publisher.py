"""Tests for StatusPublisher with mocked httpx transport."""

from __future__ import annotations

import json

import httpx
import pytest

from agentface.producer.publisher import StatusPublisher
from agentface.status.errors import PublishError
from agentface.status.models import AgentStatus

UPLOAD = "https://bucket.example.com/openclaw-status/default"
TS = 1_704_067_200_000


class _Store:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code)


class TestPublish:
    async def test_puts_document(self, make_client) -> None:
        store = _Store()
        publisher = StatusPublisher(UPLOAD, client=make_client(store))
        body = await publisher.publish(AgentStatus(busy=True, ts=TS, source="cli"))

        request = store.requests[0]
        assert request.method == "PUT"
        assert str(request.url) == f"{UPLOAD}/status.json"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Cache-Control"] == "no-cache"
        assert json.loads(request.content) == {"busy": True, "ts": TS, "source": "cli"}
        assert body == request.content.decode()

    async def test_custom_key_and_headers(self, make_client) -> None:
        store = _Store()
        publisher = StatusPublisher(
            UPLOAD + "/",
            key="/agents/main.json",
            client=make_client(store),
            headers={"Authorization": "Bearer t", "Content-Type": "text/plain"},
        )
        await publisher.publish(AgentStatus(busy=False, ts=TS))
        request = store.requests[0]
        assert str(request.url) == f"{UPLOAD}/agents/main.json"
        assert request.headers["Authorization"] == "Bearer t"
        assert request.headers["Content-Type"] == "application/json"
        assert publisher.key == "agents/main.json"

    async def test_rejected_upload_raises(self, make_client) -> None:
        publisher = StatusPublisher(UPLOAD, client=make_client(_Store(403)))
        with pytest.raises(PublishError, match="HTTP 403") as exc_info:
            await publisher.publish(AgentStatus(busy=True, ts=TS))
        assert exc_info.value.key == "status.json"

    async def test_transport_error_raises(self, make_client) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        publisher = StatusPublisher(UPLOAD, client=make_client(refuse))
        with pytest.raises(PublishError, match="connection refused"):
            await publisher.publish(AgentStatus(busy=True, ts=TS))


class TestPublishSafely:
    async def test_returns_true_on_success(self, make_client) -> None:
        publisher = StatusPublisher(UPLOAD, client=make_client(_Store()))
        assert await publisher.publish_safely(AgentStatus(busy=True, ts=TS)) is True

    async def test_swallows_failures(self, make_client, caplog) -> None:
        publisher = StatusPublisher(UPLOAD, client=make_client(_Store(500)))
        assert await publisher.publish_safely(AgentStatus(busy=True, ts=TS)) is False
        assert "Upload failed" in caplog.text


class TestLifecycle:
    async def test_owned_client_closed_on_exit(self, mock_http) -> None:
        mock_http(_Store())
        async with StatusPublisher(UPLOAD) as publisher:
            await publisher.publish(AgentStatus(busy=True, ts=TS))
            client = publisher._client
        assert client is not None
        assert client.is_closed

    async def test_injected_client_left_open(self, make_client) -> None:
        client = make_client(_Store())
        async with StatusPublisher(UPLOAD, client=client):
            pass
        assert not client.is_closed
        await client.aclose()

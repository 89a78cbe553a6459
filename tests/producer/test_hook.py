"""Tests for StatusHook event handling."""

from __future__ import annotations

import json

import httpx
import pytest

from agentface.producer.events import CommandEvent, CompleteEvent, ModelCallEvent
from agentface.producer.hook import StatusHook, status_for_event
from agentface.producer.publisher import StatusPublisher
from agentface.status.models import AgentStatus

UPLOAD = "https://bucket.example.com/openclaw-status/default"
TS = 1_704_067_200_000


@pytest.fixture()
def uploads() -> list[dict]:
    return []


@pytest.fixture()
def hook(make_client, uploads: list[dict]) -> StatusHook:
    def store(request: httpx.Request) -> httpx.Response:
        uploads.append(json.loads(request.content))
        return httpx.Response(200)

    return StatusHook(StatusPublisher(UPLOAD, client=make_client(store)))


class TestStatusForEvent:
    def test_command_carries_session_and_source(self) -> None:
        event = CommandEvent(
            action="new",
            sessionKey="agent:main:main",
            timestamp=TS,
            context={"commandSource": "telegram"},
        )
        assert status_for_event(event) == AgentStatus(
            busy=True, ts=TS, session_key="agent:main:main", source="telegram"
        )

    def test_model_call(self) -> None:
        assert status_for_event(ModelCallEvent(timestamp=TS, taskId="t")) == AgentStatus(busy=True, ts=TS)

    def test_complete(self) -> None:
        assert status_for_event(CompleteEvent(timestamp=TS)) == AgentStatus(busy=False, ts=TS)


class TestStatusHook:
    async def test_new_command_publishes_busy(self, hook: StatusHook, uploads: list[dict]) -> None:
        status = await hook.handle(
            {
                "type": "command",
                "action": "new",
                "sessionKey": "agent:main:main",
                "timestamp": TS,
                "context": {"commandSource": "telegram"},
            }
        )
        assert status is not None
        assert status.busy is True
        assert uploads == [{"busy": True, "ts": TS, "sessionKey": "agent:main:main", "source": "telegram"}]

    @pytest.mark.parametrize("action", ["stop", "reset", "status"])
    async def test_other_commands_publish_idle(self, hook: StatusHook, uploads: list[dict], action: str) -> None:
        await hook.handle({"type": "command", "action": action, "timestamp": TS})
        assert uploads == [{"busy": False, "ts": TS}]

    async def test_model_call_then_complete(self, hook: StatusHook, uploads: list[dict]) -> None:
        await hook.handle({"type": "model_call", "model": "claude", "timestamp": TS})
        await hook.handle({"type": "complete", "model": "claude", "timestamp": TS + 1})
        assert [u["busy"] for u in uploads] == [True, False]
        assert uploads[1]["ts"] == TS + 1

    async def test_unknown_events_are_ignored(self, hook: StatusHook, uploads: list[dict], caplog) -> None:
        assert await hook.handle({"type": "agent", "action": "bootstrap"}) is None
        assert await hook.handle("garbage") is None
        assert uploads == []
        assert "unrecognized event" in caplog.text

    async def test_upload_failure_never_raises(self, make_client) -> None:
        def down(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable")

        hook = StatusHook(StatusPublisher(UPLOAD, client=make_client(down)))
        assert await hook.handle({"type": "model_call", "timestamp": TS}) is None

    async def test_callable(self, hook: StatusHook, uploads: list[dict]) -> None:
        await hook({"type": "complete", "timestamp": TS})
        assert len(uploads) == 1

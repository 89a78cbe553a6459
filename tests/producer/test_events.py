"""Tests for agent lifecycle event parsing."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from agentface.producer.events import (
    CommandEvent,
    CompleteEvent,
    ModelCallEvent,
    UnknownEventError,
    is_busy,
    parse_event,
)

TS = 1_704_067_200_000


class TestParseEvent:
    def test_command_event(self) -> None:
        event = parse_event(
            {
                "type": "command",
                "action": "new",
                "sessionKey": "agent:main:main",
                "timestamp": TS,
                "messages": [],
                "context": {"commandSource": "telegram", "senderId": "42"},
            }
        )
        assert isinstance(event, CommandEvent)
        assert event.action == "new"
        assert event.session_key == "agent:main:main"
        assert event.context.command_source == "telegram"
        assert event.context.sender_id == "42"

    def test_command_timestamp_may_be_datetime(self) -> None:
        when = datetime(2024, 1, 1, tzinfo=UTC)
        event = parse_event({"type": "command", "action": "stop", "timestamp": when})
        assert event.timestamp == TS

    def test_command_context_is_optional(self) -> None:
        event = parse_event({"type": "command", "action": "reset", "timestamp": TS})
        assert isinstance(event, CommandEvent)
        assert event.context.command_source is None

    def test_model_call_event(self) -> None:
        event = parse_event({"type": "model_call", "model": "claude", "taskId": "task-1", "timestamp": TS})
        assert isinstance(event, ModelCallEvent)
        assert event.task_id == "task-1"

    def test_complete_event(self) -> None:
        event = parse_event({"type": "complete", "model": "claude", "timestamp": TS})
        assert isinstance(event, CompleteEvent)
        assert event.task_id is None

    def test_extra_fields_are_ignored(self) -> None:
        event = parse_event({"type": "complete", "timestamp": TS, "tokens": 1234})
        assert isinstance(event, CompleteEvent)

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "agent", "action": "bootstrap", "timestamp": TS},
            {"action": "new", "timestamp": TS},
            {"type": "command", "timestamp": TS},
            {"type": "model_call"},
            {"type": "complete", "timestamp": 0},
            "model_call",
            None,
        ],
    )
    def test_unknown_shapes(self, raw: object) -> None:
        with pytest.raises(UnknownEventError):
            parse_event(raw)


class TestIsBusy:
    @pytest.mark.parametrize(("action", "busy"), [("new", True), ("stop", False), ("reset", False), ("", False)])
    def test_command_actions(self, action: str, busy: bool) -> None:
        assert is_busy(CommandEvent(action=action, timestamp=TS)) is busy

    def test_model_call_is_busy(self) -> None:
        assert is_busy(ModelCallEvent(timestamp=TS)) is True

    def test_complete_is_idle(self) -> None:
        assert is_busy(CompleteEvent(timestamp=TS)) is False

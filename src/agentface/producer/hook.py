"""StatusHook — maps agent lifecycle events to published status documents.

Mapping:

* ``command`` with ``action == "new"`` → busy; any other action → idle.
* ``model_call`` → busy.
* ``complete`` → idle.

The hook runs inside the agent process, so it must never interrupt the
agent: unknown events are logged and ignored, upload failures are logged
and swallowed.
"""

from __future__ import annotations

import logging
from typing import Any

from agentface.producer.events import CommandEvent, UnknownEventError, is_busy, parse_event
from agentface.producer.publisher import StatusPublisher
from agentface.status.models import AgentStatus

logger = logging.getLogger(__name__)


def status_for_event(event: Any) -> AgentStatus:
    """Build the status document an event should publish."""
    if isinstance(event, CommandEvent):
        return AgentStatus(
            busy=is_busy(event),
            ts=event.timestamp,
            session_key=event.session_key,
            source=event.context.command_source,
        )
    return AgentStatus(busy=is_busy(event), ts=event.timestamp)


class StatusHook:
    """Event handler that publishes busy/idle on agent lifecycle events."""

    def __init__(self, publisher: StatusPublisher) -> None:
        self._publisher = publisher

    @property
    def publisher(self) -> StatusPublisher:
        return self._publisher

    async def handle(self, raw_event: Any) -> AgentStatus | None:
        """Handle one raw event; returns the published document, if any."""
        try:
            event = parse_event(raw_event)
        except UnknownEventError:
            event_type = raw_event.get("type") if isinstance(raw_event, dict) else type(raw_event).__name__
            logger.warning("Ignoring unrecognized event: type=%s", event_type)
            return None

        status = status_for_event(event)
        logger.debug("Event %s -> busy=%s", event.type, status.busy)
        if not await self._publisher.publish_safely(status):
            return None
        return status

    __call__ = handle

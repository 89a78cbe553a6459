"""Producer side — publish the status document from the agent process."""

from agentface.producer.events import (
    CommandEvent,
    CompleteEvent,
    ModelCallEvent,
    UnknownEventError,
    parse_event,
)
from agentface.producer.hook import StatusHook, status_for_event
from agentface.producer.publisher import StatusPublisher

__all__ = [
    "CommandEvent",
    "CompleteEvent",
    "ModelCallEvent",
    "StatusHook",
    "StatusPublisher",
    "UnknownEventError",
    "parse_event",
    "status_for_event",
]

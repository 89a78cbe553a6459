"""Agent lifecycle events consumed by the status hook.

Events arrive as loosely-typed mappings from the agent runtime and are
narrowed here, at the boundary, into one of a closed set of models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError


class UnknownEventError(ValueError):
    """The raw event is not one of the recognized shapes."""


def _to_epoch_ms(value: Any) -> Any:
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    return value


# Unix epoch milliseconds; runtimes may hand over a datetime instead.
EpochMs = Annotated[int, BeforeValidator(_to_epoch_ms), Field(gt=0)]


class CommandContext(BaseModel):
    """Extra context attached to a command event."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    command_source: str | None = Field(default=None, alias="commandSource")
    sender_id: str | None = Field(default=None, alias="senderId")


class CommandEvent(BaseModel):
    """A chat command; ``action == "new"`` starts a unit of work."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: Literal["command"] = "command"
    action: str
    session_key: str | None = Field(default=None, alias="sessionKey")
    timestamp: EpochMs
    messages: list[str] = []
    context: CommandContext = Field(default_factory=CommandContext)


class ModelCallEvent(BaseModel):
    """The agent started a model call."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: Literal["model_call"] = "model_call"
    model: str = ""
    task_id: str | None = Field(default=None, alias="taskId")
    timestamp: EpochMs


class CompleteEvent(BaseModel):
    """The agent finished its current unit of work."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: Literal["complete"] = "complete"
    model: str = ""
    task_id: str | None = Field(default=None, alias="taskId")
    timestamp: EpochMs


AgentEvent = Annotated[CommandEvent | ModelCallEvent | CompleteEvent, Field(discriminator="type")]

_adapter: TypeAdapter[CommandEvent | ModelCallEvent | CompleteEvent] = TypeAdapter(AgentEvent)


def parse_event(raw: Any) -> CommandEvent | ModelCallEvent | CompleteEvent:
    """Narrow a raw event mapping into a typed event.

    Raises:
        UnknownEventError: If *raw* has an unrecognized ``type`` or does not
            match the model for its type.
    """
    try:
        return _adapter.validate_python(raw)
    except ValidationError as exc:
        raise UnknownEventError(str(exc)) from exc


def is_busy(event: CommandEvent | ModelCallEvent | CompleteEvent) -> bool:
    """Busy value an event implies for the status document."""
    if isinstance(event, CommandEvent):
        return event.action == "new"
    return isinstance(event, ModelCallEvent)

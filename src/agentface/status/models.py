"""Status document and connection-state models.

The status document is the only wire format in the system::

    {"busy": true, "ts": 1704067200000, "sessionKey": "agent:main:main", "source": "telegram"}

``busy`` and ``ts`` are required; ``sessionKey`` and ``source`` are
display-only and silently dropped when they are not strings.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

from agentface.status.errors import StatusDecodeError, StatusSchemaError

MAX_DOCUMENT_BYTES = 1024

_OPTIONAL_FIELDS = ("sessionKey", "source")


class AgentStatus(BaseModel):
    """Busy/idle snapshot published by the agent."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    busy: StrictBool
    ts: StrictInt = Field(..., gt=0, description="Unix epoch milliseconds.")
    session_key: str | None = Field(default=None, alias="sessionKey")
    source: str | None = None


class ConnectionState(BaseModel):
    """Polling health derived from consecutive fetch outcomes.

    Instances are immutable; the poller swaps in a new record after every
    attempt so readers never observe a half-updated state.
    """

    model_config = ConfigDict(frozen=True)

    connected: bool = True
    last_success_time: int = 0
    failure_count: int = Field(default=0, ge=0)

    @classmethod
    def initial(cls) -> ConnectionState:
        return cls()

    def after_success(self, now_ms: int) -> ConnectionState:
        """State after a fetch that produced a valid document."""
        return ConnectionState(connected=True, last_success_time=now_ms, failure_count=0)

    def after_failure(self, max_failures: int) -> ConnectionState:
        """State after any kind of failed fetch."""
        failures = self.failure_count + 1
        return ConnectionState(
            connected=failures < max_failures,
            last_success_time=self.last_success_time,
            failure_count=failures,
        )


def parse_status(data: Any) -> AgentStatus:
    """Validate an already-decoded JSON value into an :class:`AgentStatus`.

    Raises:
        StatusSchemaError: If *data* is not an object or ``busy``/``ts`` are
            missing or mistyped.
    """
    if not isinstance(data, dict):
        raise StatusSchemaError(f"expected a JSON object, got {type(data).__name__}")

    fields: dict[str, Any] = {}
    for key in ("busy", "ts"):
        if key in data:
            fields[key] = data[key]
    for key in _OPTIONAL_FIELDS:
        if isinstance(data.get(key), str):
            fields[key] = data[key]

    try:
        return AgentStatus.model_validate(fields)
    except ValidationError as exc:
        raise StatusSchemaError(_summarize(exc)) from exc


def decode_status(body: bytes | str) -> AgentStatus:
    """Decode a raw response body and validate it.

    Raises:
        StatusDecodeError: If *body* is not valid JSON.
        StatusSchemaError: If the JSON value is not a valid status document.
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise StatusDecodeError(str(exc)) from exc
    return parse_status(data)


def serialize_status(status: AgentStatus) -> str:
    """Serialize to the compact wire form, omitting absent optional fields."""
    payload = status.model_dump(by_alias=True, exclude_none=True)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "document"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)

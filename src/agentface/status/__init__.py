"""Status document models and the polling client that consumes them."""

from agentface.status.errors import (
    PublishError,
    StatusDecodeError,
    StatusFetchError,
    StatusHTTPError,
    StatusSchemaError,
    StatusTransportError,
)
from agentface.status.models import (
    MAX_DOCUMENT_BYTES,
    AgentStatus,
    ConnectionState,
    decode_status,
    parse_status,
    serialize_status,
)
from agentface.status.poller import StatusPoller
from agentface.status.ticker import AsyncioTicker, Ticker

__all__ = [
    "MAX_DOCUMENT_BYTES",
    "AgentStatus",
    "AsyncioTicker",
    "ConnectionState",
    "PublishError",
    "StatusDecodeError",
    "StatusFetchError",
    "StatusHTTPError",
    "StatusPoller",
    "StatusSchemaError",
    "StatusTransportError",
    "Ticker",
    "decode_status",
    "parse_status",
    "serialize_status",
]

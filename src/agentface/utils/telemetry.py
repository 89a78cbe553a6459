"""OpenTelemetry tracing for status fetches and uploads.

Spans are always created through the OpenTelemetry API; without an SDK
provider they are no-ops, so the poller pays nothing for them by default::

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("status.fetch") as span:
        span.set_attribute(ATTR_STATUS_URL, url)

``agentface watch --telemetry`` (or ``telemetry.enabled: true`` in the
settings file) installs a real provider via :func:`configure_telemetry`,
which needs the ``otel`` extra: ``pip install agentface[otel]``.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from agentface.config import TelemetrySettings

# Span attribute keys.
ATTR_STATUS_URL = "agentface.status.url"
ATTR_STATUS_HTTP_STATUS = "agentface.status.http_status"
ATTR_STATUS_OUTCOME = "agentface.status.outcome"
ATTR_STATUS_FAILURE_COUNT = "agentface.status.failure_count"
ATTR_PUBLISH_KEY = "agentface.publish.key"
ATTR_PUBLISH_BUSY = "agentface.publish.busy"

_INSTRUMENTATION_NAME = "agentface"
_EXTRA_HINT = "Install it with: pip install agentface[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Tracer for *name*; a no-op until :func:`configure_telemetry` runs."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    settings: TelemetrySettings | None = None,
    *,
    service_name: str = "agentface",
    export_to_console: bool = False,
) -> Any:
    """Install an SDK tracer provider and return it.

    Spans go to the OTLP/gRPC endpoint named in *settings*.  Without an
    endpoint, or with *export_to_console*, they are written to stderr as
    JSON so a live display on stdout is left intact.

    Raises:
        ImportError: If ``opentelemetry-sdk`` (or, for OTLP export,
            ``opentelemetry-exporter-otlp``) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required for configure_telemetry(). {_EXTRA_HINT}"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    endpoint = settings.otlp_endpoint if settings is not None else None
    if export_to_console or not endpoint:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    if endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(endpoint)))

    trace.set_tracer_provider(provider)
    return provider


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_EXTRA_HINT}"
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)

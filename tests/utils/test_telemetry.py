"""Tests for OpenTelemetry tracing helpers."""

from __future__ import annotations

import sys
from unittest.mock import patch

import httpx
import pytest
from opentelemetry import trace

from agentface.config import TelemetrySettings
from agentface.utils import telemetry
from agentface.utils.telemetry import (
    ATTR_PUBLISH_BUSY,
    ATTR_PUBLISH_KEY,
    ATTR_STATUS_FAILURE_COUNT,
    ATTR_STATUS_HTTP_STATUS,
    ATTR_STATUS_OUTCOME,
    ATTR_STATUS_URL,
    _INSTRUMENTATION_NAME,
    configure_telemetry,
    get_tracer,
)


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        tracer = get_tracer("test.module")
        assert isinstance(tracer, trace.Tracer)

    def test_default_name(self) -> None:
        assert _INSTRUMENTATION_NAME == "agentface"
        assert isinstance(get_tracer(), trace.Tracer)

    def test_noop_span(self) -> None:
        """Without SDK configured, spans should be no-ops."""
        tracer = get_tracer("test.noop")
        with tracer.start_as_current_span("status.fetch") as span:
            span.set_attribute(ATTR_STATUS_URL, "https://x")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        """configure_telemetry requires opentelemetry-sdk."""
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="agentface\\[otel\\]"):
                configure_telemetry()

    def test_configures_with_console(self) -> None:
        try:
            from opentelemetry.sdk.trace import TracerProvider
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch.object(telemetry.trace, "set_tracer_provider") as set_provider:
            configure_telemetry(service_name="test-svc", export_to_console=True)
        provider = set_provider.call_args.args[0]
        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "test-svc"

    def test_enabled_without_endpoint_exports_to_stderr(self) -> None:
        try:
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.sdk.trace.export import SimpleSpanProcessor
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with (
            patch.object(TracerProvider, "add_span_processor", autospec=True) as add_processor,
            patch.object(telemetry.trace, "set_tracer_provider"),
        ):
            configure_telemetry(TelemetrySettings(enabled=True))

        (call,) = add_processor.call_args_list
        processor = call.args[1]
        assert isinstance(processor, SimpleSpanProcessor)
        assert processor.span_exporter.out is sys.stderr

    def test_otlp_raises_without_exporter(self) -> None:
        """OTLP export requires opentelemetry-exporter-otlp."""
        try:
            import opentelemetry.sdk.trace  # noqa: F401
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch.dict(
            "sys.modules",
            {"opentelemetry.exporter.otlp.proto.grpc.trace_exporter": None},
        ):
            with pytest.raises(ImportError, match="opentelemetry-exporter-otlp"):
                configure_telemetry(TelemetrySettings(enabled=True, otlp_endpoint="http://localhost:4317"))


class TestAttributeConstants:
    @pytest.mark.parametrize(
        "attr",
        [
            ATTR_STATUS_URL,
            ATTR_STATUS_HTTP_STATUS,
            ATTR_STATUS_OUTCOME,
            ATTR_STATUS_FAILURE_COUNT,
            ATTR_PUBLISH_KEY,
            ATTR_PUBLISH_BUSY,
        ],
    )
    def test_namespaced(self, attr: str) -> None:
        assert attr.startswith("agentface.")


class TestFetchSpans:
    async def test_poller_records_span_attributes(self, make_client) -> None:
        try:
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.sdk.trace.export import SimpleSpanProcessor
            from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        from agentface.status import poller as poller_module

        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))

        client = make_client(lambda request: httpx.Response(503))
        with patch.object(poller_module, "_tracer", provider.get_tracer("test")):
            poller = poller_module.StatusPoller("https://x.example.com/status.json", client=client)
            await poller.refresh()

        (span,) = exporter.get_finished_spans()
        assert span.name == "status.fetch"
        assert span.attributes[ATTR_STATUS_URL] == "https://x.example.com/status.json"
        assert span.attributes[ATTR_STATUS_HTTP_STATUS] == 503
        assert span.attributes[ATTR_STATUS_OUTCOME] == "failure"
        assert span.attributes[ATTR_STATUS_FAILURE_COUNT] == 1

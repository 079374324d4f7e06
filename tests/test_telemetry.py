"""Tests for upstream tracing spans."""

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from boomi_proxy.telemetry import TracingConfig, UpstreamSpan, record_response, get_trace_context
from boomi_proxy.config import TelemetryConfig


def make_tracer():
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider.get_tracer("test"), exporter


def test_upstream_span_attributes(monkeypatch):
    tracer, exporter = make_tracer()
    monkeypatch.setattr("boomi_proxy.telemetry.spans.get_tracer", lambda: tracer)

    with UpstreamSpan.call("get_deployment", "GET", "/ProcessDeployment/d", "acct") as span:
        assert get_trace_context()["trace_id"]
        record_response(span, 404)

    (finished,) = exporter.get_finished_spans()
    assert finished.name == "boomi.get_deployment"
    assert finished.attributes["http.method"] == "GET"
    assert finished.attributes["boomi.account_id"] == "acct"
    assert finished.attributes["http.status_code"] == 404
    assert finished.status.status_code == StatusCode.ERROR


def test_no_trace_context_outside_span():
    assert get_trace_context() == {}


def test_tracing_config_from_config():
    config = TracingConfig.from_config(TelemetryConfig(otlp_endpoint="http://otel:4317", console_export=True))

    assert config.service_name == "boomi-proxy"
    assert config.otlp_endpoint == "http://otel:4317"
    assert config.console_export is True

"""
Boomi Proxy Telemetry Module

OpenTelemetry integration for tracing proxied Boomi calls.
"""

from .tracer import init_telemetry, get_tracer, TracingConfig
from .spans import UpstreamSpan, SpanKind, record_response, get_trace_context

__all__ = [
    "init_telemetry",
    "get_tracer",
    "TracingConfig",
    "UpstreamSpan",
    "SpanKind",
    "record_response",
    "get_trace_context",
]

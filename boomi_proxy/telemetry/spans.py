"""
Proxy-specific span helpers.
"""

from enum import Enum
from typing import Optional, Dict
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .tracer import get_tracer


class SpanKind(Enum):
    """Types of proxy spans."""

    ROUTE = "route"
    UPSTREAM = "upstream"


class UpstreamSpan:
    """
    Helper for creating proxy-specific spans.

    Usage:
        with UpstreamSpan.call("get_deployment", "GET", path, account_id) as span:
            response = await client.get(path)
            record_response(span, response.status_code)
    """

    @staticmethod
    @contextmanager
    def call(
        operation: str,
        method: str,
        path: str,
        account_id: Optional[str] = None,
    ):
        """Create a span for one Boomi API call."""
        tracer = get_tracer()

        with tracer.start_as_current_span(
            f"boomi.{operation}",
            attributes={
                "proxy.span_kind": SpanKind.UPSTREAM.value,
                "proxy.operation": operation,
                "http.method": method,
                "http.target": path,
                "boomi.account_id": account_id or "",
            }
        ) as span:
            yield span

    @staticmethod
    @contextmanager
    def route(operation: str, action: Optional[str] = None):
        """Create a span for an inbound proxy route."""
        tracer = get_tracer()

        with tracer.start_as_current_span(
            f"proxy.{operation}",
            attributes={
                "proxy.span_kind": SpanKind.ROUTE.value,
                "proxy.operation": operation,
                "proxy.action": action or "",
            }
        ) as span:
            yield span


def record_response(span, status_code: int):
    """Attach the upstream status to a span; non-2xx marks it as an error."""
    span.set_attribute("http.status_code", status_code)
    if status_code >= 400:
        span.set_status(Status(StatusCode.ERROR, f"HTTP {status_code}"))


def get_trace_context() -> Dict[str, str]:
    """
    Get current trace context for log correlation.

    Returns trace_id and span_id, or an empty dict outside a recorded span.
    """
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return {}

    return {
        "trace_id": format(ctx.trace_id, '032x'),
        "span_id": format(ctx.span_id, '016x'),
    }

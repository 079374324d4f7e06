"""
OpenTelemetry Tracer Configuration

Initializes OTEL with OTLP exporter for distributed tracing.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .. import __version__
from ..config import TelemetryConfig

logger = logging.getLogger("boomi-proxy.telemetry")

_tracer = None
_initialized = False


@dataclass
class TracingConfig:
    """Configuration for OpenTelemetry tracing."""

    service_name: str = "boomi-proxy"
    service_version: str = __version__

    # OTLP exporter settings
    otlp_endpoint: Optional[str] = None  # e.g., "http://localhost:4317"
    otlp_insecure: bool = True

    # Console exporter for debugging
    console_export: bool = False

    @classmethod
    def from_env(cls) -> "TracingConfig":
        """Load config from environment variables."""
        return cls(
            service_name=os.getenv("OTEL_SERVICE_NAME", "boomi-proxy"),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"),
            otlp_insecure=os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "true").lower() == "true",
            console_export=os.getenv("OTEL_CONSOLE_EXPORT", "false").lower() == "true",
        )

    @classmethod
    def from_config(cls, config: TelemetryConfig) -> "TracingConfig":
        return cls(
            service_name=config.service_name,
            otlp_endpoint=config.otlp_endpoint,
            otlp_insecure=config.otlp_insecure,
            console_export=config.console_export,
        )


def init_telemetry(config: Optional[TracingConfig] = None) -> bool:
    """
    Initialize OpenTelemetry tracing.

    Returns True once a tracer provider is installed.
    """
    global _tracer, _initialized

    if _initialized:
        return True

    config = config or TracingConfig.from_env()

    resource = Resource.create({
        SERVICE_NAME: config.service_name,
        SERVICE_VERSION: config.service_version,
        "deployment.environment": os.getenv("ENVIRONMENT", "development"),
    })

    provider = TracerProvider(resource=resource)

    if config.otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        otlp_exporter = OTLPSpanExporter(
            endpoint=config.otlp_endpoint,
            insecure=config.otlp_insecure,
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        logger.info(f"OTEL: OTLP exporter configured → {config.otlp_endpoint}")

    if config.console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("OTEL: Console exporter enabled")

    trace.set_tracer_provider(provider)

    _tracer = trace.get_tracer(config.service_name, config.service_version)
    _initialized = True

    logger.info(f"OTEL: Telemetry initialized for {config.service_name}")
    return True


def get_tracer():
    """
    Get the configured tracer instance.

    Falls back to the API's global tracer, which is a no-op until a
    provider is installed.
    """
    if _tracer is not None:
        return _tracer
    return trace.get_tracer("boomi-proxy")

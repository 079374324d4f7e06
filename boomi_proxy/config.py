"""
Configuration management for Boomi Proxy.

Supports YAML configuration with environment variable expansion.
"""

import os
import re
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Mapping

import yaml


DEFAULT_BOOMI_API_URL = "https://api.boomi.com/api/rest/v1"


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 0  # 0 = OS-assigned
    # File descriptor of the parent's notification channel, if any
    report_fd: Optional[int] = None


@dataclass
class UpstreamConfig:
    """Boomi AtomSphere API configuration."""
    base_url: str = DEFAULT_BOOMI_API_URL
    # None = httpx default
    timeout: Optional[float] = None


@dataclass
class TelemetryConfig:
    """OpenTelemetry tracing configuration."""
    enabled: bool = False
    service_name: str = "boomi-proxy"
    otlp_endpoint: Optional[str] = None
    otlp_insecure: bool = True
    console_export: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"


@dataclass
class ProxyConfig:
    """Root configuration for Boomi Proxy."""
    server: ServerConfig = field(default_factory=ServerConfig)
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def expand_env_vars(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """Recursively expand environment variables in config values."""
    environ = os.environ if environ is None else environ

    if isinstance(value, str):
        # Match ${VAR} or $VAR patterns
        pattern = r'\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)'

        def replace(match):
            var_name = match.group(1) or match.group(2)
            return environ.get(var_name, match.group(0))

        return re.sub(pattern, replace, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v, environ) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(v, environ) for v in value]
    return value


def _as_int(value: Any, default: Optional[int]) -> Optional[int]:
    """Coerce a config value to int; unresolved or empty values fall back."""
    if value is None or value == "":
        return default
    if isinstance(value, str) and value.startswith("$"):
        return default
    return int(value)


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes", "on")
    return bool(value)


def parse_config(data: Dict[str, Any]) -> ProxyConfig:
    """Build a ProxyConfig from an already-expanded dict."""
    data = data or {}

    server_data = data.get("server") or {}
    server = ServerConfig(
        host=server_data.get("host", "0.0.0.0"),
        port=_as_int(server_data.get("port"), 0),
        report_fd=_as_int(server_data.get("report_fd"), None),
    )

    upstream_data = data.get("upstream") or {}
    upstream = UpstreamConfig(
        base_url=(upstream_data.get("base_url") or DEFAULT_BOOMI_API_URL).rstrip("/"),
        timeout=_as_float(upstream_data.get("timeout")),
    )

    telemetry_data = data.get("telemetry") or {}
    telemetry = TelemetryConfig(
        enabled=_as_bool(telemetry_data.get("enabled"), False),
        service_name=telemetry_data.get("service_name", "boomi-proxy"),
        otlp_endpoint=telemetry_data.get("otlp_endpoint"),
        otlp_insecure=_as_bool(telemetry_data.get("otlp_insecure"), True),
        console_export=_as_bool(telemetry_data.get("console_export"), False),
    )

    logging_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "INFO")).upper(),
    )

    return ProxyConfig(
        server=server,
        upstream=upstream,
        telemetry=telemetry,
        logging=logging_config,
    )


def load_config(path: str | Path, environ: Optional[Mapping[str, str]] = None) -> ProxyConfig:
    """Load configuration from YAML file."""
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    # Expand environment variables
    data = expand_env_vars(raw or {}, environ)

    return parse_config(data)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> ProxyConfig:
    """Build the default configuration, honouring the process environment."""
    environ = os.environ if environ is None else environ

    return parse_config({
        "server": {
            "host": environ.get("HOST", "0.0.0.0"),
            "port": environ.get("PORT"),
            "report_fd": environ.get("BOOMI_PROXY_REPORT_FD"),
        },
        "upstream": {
            "base_url": environ.get("BOOMI_API_URL"),
            "timeout": environ.get("BOOMI_API_TIMEOUT"),
        },
        "telemetry": {
            "enabled": environ.get("OTEL_ENABLED"),
            "service_name": environ.get("OTEL_SERVICE_NAME", "boomi-proxy"),
            "otlp_endpoint": environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"),
            "otlp_insecure": environ.get("OTEL_EXPORTER_OTLP_INSECURE"),
            "console_export": environ.get("OTEL_CONSOLE_EXPORT"),
        },
        "logging": {
            "level": environ.get("BOOMI_PROXY_LOG_LEVEL", "INFO"),
        },
    })


def create_default_config() -> str:
    """Generate default configuration YAML."""
    return """# Boomi Proxy Configuration

server:
  host: 0.0.0.0
  # 0 lets the OS pick a free port
  port: ${PORT}
  # report_fd: 3

# Boomi AtomSphere REST API
upstream:
  base_url: https://api.boomi.com/api/rest/v1
  # timeout: 30

# OpenTelemetry tracing
telemetry:
  enabled: false
  # otlp_endpoint: http://localhost:4317
  console_export: false

logging:
  level: INFO
"""

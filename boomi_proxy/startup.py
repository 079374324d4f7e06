"""
Process startup: bind, report the bound port, serve.

The bound port is known only after binding (port 0 lets the OS choose), so
it is read from the socket once and handed to the startup reporter. When a
supervising parent process opened a notification channel, the port goes
there as a JSON message; otherwise it is logged to stderr so stdout stays
clean for the parent.
"""

import os
import sys
import json
import socket
import asyncio
import logging
from typing import Mapping, Optional

import uvicorn

from .config import ProxyConfig
from .server import create_app
from .telemetry import init_telemetry, TracingConfig

logger = logging.getLogger("boomi-proxy.startup")

# Set by Node.js when it spawns a child with an "ipc" stdio channel
NODE_CHANNEL_FD = "NODE_CHANNEL_FD"


class StartupReporter:
    """Announces the bound port once the server socket is listening."""

    def report(self, port: int) -> None:
        raise NotImplementedError


class LogStartupReporter(StartupReporter):
    """Logs the port to the error stream."""

    def report(self, port: int) -> None:
        logger.info(f"Boomi proxy running on port {port}")


class IPCStartupReporter(StartupReporter):
    """Writes ``{"port": <port>}`` as one JSON line to the parent's channel."""

    def __init__(self, fd: int):
        self.fd = fd

    def report(self, port: int) -> None:
        message = json.dumps({"port": port}) + "\n"
        os.write(self.fd, message.encode())


def select_reporter(
    config: ProxyConfig,
    environ: Optional[Mapping[str, str]] = None,
) -> StartupReporter:
    """IPC reporter when a notification channel exists, log reporter otherwise."""
    environ = os.environ if environ is None else environ

    if config.server.report_fd is not None:
        return IPCStartupReporter(config.server.report_fd)

    channel = environ.get(NODE_CHANNEL_FD)
    if channel:
        return IPCStartupReporter(int(channel))

    return LogStartupReporter()


def bind_socket(host: str, port: int, backlog: int = 2048) -> socket.socket:
    """Bind and listen; raises OSError if the address is unavailable."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    return sock


def bound_port(sock: socket.socket) -> int:
    return sock.getsockname()[1]


def setup_logging(level: str = "INFO") -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("boomi-proxy").setLevel(numeric_level)
    # The bound port is always announced, whatever the configured level
    logger.setLevel(logging.INFO)


def serve(config: ProxyConfig, reporter: Optional[StartupReporter] = None) -> None:
    """Run the proxy until interrupted. Exits with status 1 on startup failure."""
    setup_logging(config.logging.level)

    if config.telemetry.enabled:
        init_telemetry(TracingConfig.from_config(config.telemetry))

    app = create_app(config)

    try:
        sock = bind_socket(config.server.host, config.server.port)
    except OSError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

    port = bound_port(sock)
    reporter = reporter or select_reporter(config)

    server = uvicorn.Server(uvicorn.Config(
        app,
        log_config=None,
        access_log=False,
        log_level=config.logging.level.lower(),
    ))

    reporter.report(port)

    try:
        asyncio.run(server.serve(sockets=[sock]))
    finally:
        sock.close()

    if not server.started:
        logger.error("Server error: failed to start")
        sys.exit(1)

"""
Boomi Proxy Server

FastAPI application that relays deployment and process calls to the
Boomi AtomSphere REST API.
"""

import logging
from typing import Optional
from datetime import datetime, timezone
from contextlib import contextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import ProxyConfig, config_from_env
from .errors import ProxyError, UpstreamError, register_exception_handlers
from .boomi import (
    BoomiClient,
    Credentials,
    CredentialsBody,
    DeploymentTypeView,
    ListenerAction,
    SchedulerAction,
    ToggleResult,
)
from .telemetry import UpstreamSpan, get_trace_context

logger = logging.getLogger("boomi-proxy")


def trace_suffix() -> str:
    """Trace ids for log lines, empty when no span is recording."""
    ctx = get_trace_context()
    if not ctx:
        return ""
    return f" [trace_id={ctx['trace_id']} span_id={ctx['span_id']}]"


@contextmanager
def reported(operation: str, action: Optional[str] = None):
    """
    Log any failure of a route with its context.

    ProxyErrors pass through unchanged; anything else becomes a 500
    UpstreamError carrying the exception message.
    """
    context = f"{operation} ({action})" if action else operation
    with UpstreamSpan.route(operation, action):
        try:
            yield
        except ProxyError as e:
            logger.error(f"Error {context}: {e.detail}{trace_suffix()}")
            raise
        except Exception as e:
            logger.error(f"Error {context}: {e}{trace_suffix()}")
            raise UpstreamError(str(e)) from e


def health_timestamp() -> str:
    """Current UTC time, ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    config: ProxyConfig = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create FastAPI application."""
    config = config or config_from_env()
    upstream = config.upstream

    def boomi(credentials: Credentials) -> BoomiClient:
        return BoomiClient(
            credentials,
            base_url=upstream.base_url,
            timeout=upstream.timeout,
            transport=transport,
        )

    app = FastAPI(
        title="Boomi Proxy",
        description="HTTP proxy for Boomi AtomSphere deployments and processes",
        version=__version__,
    )

    app.state.config = config

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # =========================================================================
    # Routes
    # =========================================================================

    @app.get("/health")
    async def health():
        """Health check."""
        return {"status": "healthy", "timestamp": health_timestamp()}

    # -------------------------------------------------------------------------
    # Deployments
    # -------------------------------------------------------------------------

    @app.get("/api/deployments")
    async def list_deployments(
        accountId: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        processId: Optional[str] = None,
    ):
        """Full deployment records, in the order Boomi's query returns them."""
        with reported("fetching deployments"):
            credentials = Credentials.require(accountId, username, password)
            async with boomi(credentials) as client:
                return await client.list_deployments(processId)

    @app.get("/api/deployment/{deployment_id}/type")
    async def deployment_type(
        deployment_id: str,
        accountId: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """Whether a deployment is listener- or schedule-driven."""
        with reported("checking deployment type"):
            credentials = Credentials.require(accountId, username, password)
            async with boomi(credentials) as client:
                record = await client.get_deployment(deployment_id)
            return DeploymentTypeView.from_record(record)

    @app.post("/api/deployment/{deployment_id}/listener/{action}")
    async def toggle_listener(
        deployment_id: str,
        action: str,
        body: Optional[CredentialsBody] = None,
    ):
        """Enable or disable a deployment's listener."""
        with reported("toggling listener", action):
            credentials = (body or CredentialsBody()).require()
            listener_action = ListenerAction.parse(action)
            async with boomi(credentials) as client:
                response = await client.toggle_listener(deployment_id, listener_action)

            return ToggleResult(
                message=f"Listener {listener_action.past_tense} successfully",
                deploymentId=deployment_id,
                response=response,
            )

    @app.post("/api/deployment/{deployment_id}/scheduler/{action}")
    async def toggle_scheduler(
        deployment_id: str,
        action: str,
        body: Optional[CredentialsBody] = None,
    ):
        """Pause or resume a deployment's schedule."""
        with reported("toggling scheduler", action):
            credentials = (body or CredentialsBody()).require()
            scheduler_action = SchedulerAction.parse(action)
            async with boomi(credentials) as client:
                response = await client.toggle_scheduler(deployment_id, scheduler_action)

            return ToggleResult(
                message=f"Scheduler {scheduler_action.past_tense} successfully",
                deploymentId=deployment_id,
                response=response,
            )

    # -------------------------------------------------------------------------
    # Processes
    # -------------------------------------------------------------------------

    @app.get("/api/processes")
    async def list_processes(
        accountId: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """Every process in the account, unfiltered."""
        with reported("fetching processes"):
            credentials = Credentials.require(accountId, username, password)
            async with boomi(credentials) as client:
                return await client.query_processes()

    return app

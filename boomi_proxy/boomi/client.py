"""
Boomi Client - async access to the AtomSphere REST API.

One client is opened per inbound request with that request's credentials.

Usage:
    async with BoomiClient(credentials, base_url) as client:
        deployments = await client.list_deployments(process_id="...")
"""

import asyncio
import logging
from typing import Optional, Dict, List, Any

import httpx

from ..errors import UpstreamError
from ..telemetry import UpstreamSpan, record_response
from .models import (
    Credentials,
    ListenerAction,
    SchedulerAction,
    deployment_query,
    match_all_filter,
    summary_ids,
)

logger = logging.getLogger("boomi-proxy.boomi")


def decode_body(response: httpx.Response) -> Any:
    """JSON body if it parses, raw text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class BoomiClient:
    """
    Client for one Boomi account, authenticated with Basic-Auth.

    Any non-2xx response or transport failure raises UpstreamError; nothing
    is retried.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.base_url = credentials.account_url(base_url)

        client_kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "headers": credentials.auth_headers(),
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> "BoomiClient":
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Any = None,
    ) -> Any:
        with UpstreamSpan.call(operation, method, path, self.credentials.account_id) as span:
            try:
                response = await self._client.request(method, path, json=json)
            except httpx.HTTPError as e:
                span.record_exception(e)
                raise UpstreamError(str(e) or type(e).__name__) from e

            record_response(span, response.status_code)

        if not response.is_success:
            raise UpstreamError(decode_body(response), status_code=response.status_code)

        return decode_body(response)

    # -------------------------------------------------------------------------
    # Deployments
    # -------------------------------------------------------------------------

    async def query_deployments(self, process_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Deployment summaries, optionally for a single process."""
        result = await self._request(
            "query_deployments",
            "POST",
            "/ProcessDeployment/query",
            json=deployment_query(process_id),
        )
        return result or []

    async def get_deployment(self, deployment_id: str) -> Dict[str, Any]:
        """Full ProcessDeployment record."""
        return await self._request(
            "get_deployment",
            "GET",
            f"/ProcessDeployment/{deployment_id}",
        )

    async def list_deployments(self, process_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Query deployments, then fetch every record's details concurrently.

        Results follow the query order. The first failing detail fetch fails
        the whole call.
        """
        summaries = await self.query_deployments(process_id)
        ids = summary_ids(summaries)
        logger.debug(f"Fetching details for {len(ids)} deployment(s)")

        return list(await asyncio.gather(
            *(self.get_deployment(deployment_id) for deployment_id in ids)
        ))

    async def toggle_listener(self, deployment_id: str, action: ListenerAction) -> Any:
        return await self._request(
            f"listener_{action.value}",
            "POST",
            f"/ProcessDeployment/{deployment_id}/listener/{action.value}",
            json={},
        )

    async def toggle_scheduler(self, deployment_id: str, action: SchedulerAction) -> Any:
        return await self._request(
            f"scheduler_{action.value}",
            "POST",
            f"/ProcessDeployment/{deployment_id}/schedule/{action.value}",
            json={},
        )

    # -------------------------------------------------------------------------
    # Processes
    # -------------------------------------------------------------------------

    async def query_processes(self) -> Any:
        """Every process in the account, as Boomi returns it."""
        return await self._request(
            "query_processes",
            "POST",
            "/Process/query",
            json=match_all_filter(),
        )

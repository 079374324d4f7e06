"""Shared fixtures: a scripted Boomi API behind httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from boomi_proxy.config import ProxyConfig
from boomi_proxy.server import create_app


ACCOUNT = "acme-123"
BASE_PATH = f"/api/rest/v1/{ACCOUNT}"
CREDS = {"accountId": ACCOUNT, "username": "ada", "password": "s3cret"}


class FakeBoomi:
    """
    Scripted upstream.

    Routes map (method, path below the account URL) to a JSON body, or to
    a (status, body) tuple. ``delays`` holds per-path sleeps in seconds.
    """

    def __init__(self):
        self.routes = {}
        self.delays = {}
        self.requests = []
        self.completed = []
        self.fail_with = None

    def add(self, method: str, path: str, body=None, status: int = 200):
        self.routes[(method, path)] = (status, body)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.fail_with is not None:
            raise self.fail_with

        path = request.url.path
        assert path.startswith(BASE_PATH), path
        path = path[len(BASE_PATH):]

        delay = self.delays.get(path)
        if delay:
            await asyncio.sleep(delay)

        status, body = self.routes.get((request.method, path), (404, {"message": "not scripted"}))
        self.completed.append(path)

        if isinstance(body, str):
            return httpx.Response(status, text=body)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def json_bodies(self):
        return [json.loads(r.content) if r.content else None for r in self.requests]


@pytest.fixture
def boomi():
    return FakeBoomi()


@pytest.fixture
def client(boomi):
    app = create_app(ProxyConfig(), transport=boomi.transport())
    with TestClient(app) as test_client:
        yield test_client

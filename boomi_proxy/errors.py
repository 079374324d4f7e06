"""
Error types for the Boomi proxy and their HTTP rendering.

Every error reaches the caller as ``{"error": <detail>}``.
"""

from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ProxyError(Exception):
    """Base error carrying the HTTP status and detail returned to the caller."""

    status_code: int = 500

    def __init__(self, detail: Any = None, status_code: int = None):
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(str(detail))


class MissingCredentials(ProxyError):
    """accountId, username or password was not supplied."""

    status_code = 400

    def __init__(self):
        super().__init__("Missing required authentication parameters")


class InvalidAction(ProxyError):
    """Toggle action outside the allowed pair."""

    status_code = 400

    def __init__(self, allowed: Sequence[str]):
        self.allowed = tuple(allowed)
        super().__init__(f"Action must be {' or '.join(self.allowed)}")


class UpstreamError(ProxyError):
    """Boomi call failed; status mirrors the upstream response when there is one."""

    status_code = 500


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are a 400 in the same ``{"error": ...}`` shape."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {'; '.join(messages)}"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render ProxyError subclasses and request validation errors as JSON error bodies."""
    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

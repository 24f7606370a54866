"""HTTP middleware: request logging, security headers and origin guard."""

from __future__ import annotations

import time
import uuid
from typing import Callable, Iterable

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .api.errors import translate
from .exceptions import OriginNotAllowedError
from .security.headers import REQUEST_ID_HEADER, SECURITY_HEADERS

log = structlog.get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request with method, path, status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)
        request.state.request_id = request_id
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            log.info(
                "request.completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                client_ip=request.client.host if request.client else None,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Rejects cross-origin calls to ``prefix`` from origins outside the list.

    Requests without an ``Origin`` header (curl, server-to-server) pass.
    A ``*`` entry allows every origin.
    """

    def __init__(
        self,
        app: ASGIApp,
        allowed_origins: Iterable[str],
        prefix: str = "/api",
        debug: bool = False,
    ) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)
        self.prefix = prefix
        self.debug = debug

    def is_allowed(self, origin: str | None) -> bool:
        if origin is None:
            return True
        return "*" in self.allowed_origins or origin in self.allowed_origins

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if request.url.path.startswith(self.prefix) and not self.is_allowed(origin):
            log.warning("origin.rejected", origin=origin, path=request.url.path)
            status_code, body = translate(OriginNotAllowedError(), debug=self.debug)
            return JSONResponse(status_code=status_code, content=body)
        return await call_next(request)


__all__ = [
    "OriginGuardMiddleware",
    "REQUEST_ID_HEADER",
    "RequestLoggingMiddleware",
    "SECURITY_HEADERS",
    "SecurityHeadersMiddleware",
]

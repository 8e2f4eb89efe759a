"""
HTTP middleware stack.

Registered in ``src.main`` (outermost first): request id, access log,
security headers. The request id is what log records carry as
``correlation_id``.
"""

import logging
import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.core.logging import request_id_ctx

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# A caller-supplied id is echoed only when it looks like an opaque token
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{8,64}$")

_DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")

# Swagger UI loads its bundle from jsdelivr
_DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https:"
)
_API_CSP = "default-src 'none'; frame-ancestors 'none'"

_STATIC_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a well-formed incoming id, otherwise mint a UUID4."""
    if incoming and _SAFE_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request id to ``request.state``, the log context and the response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        ctx_token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(ctx_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One access-log line per request, with ``X-Response-Time`` on the response.

    5xx responses and unhandled errors log at ERROR, 4xx at WARNING,
    everything else at INFO.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        client = request.client.host if request.client else "unknown"
        summary = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.perf_counter() - started
            logger.error(
                f"{summary} raised {type(e).__name__} - client={client} elapsed={elapsed:.3f}s",
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - started
        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, f"{summary} {status} - client={client} elapsed={elapsed:.3f}s")

        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Hardening headers for a JSON-only API; HSTS only when ``enable_hsts``."""

    def __init__(self, app: ASGIApp, enable_hsts: bool = False):
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers.update(_STATIC_HEADERS)
        is_docs = request.url.path.startswith(_DOCS_PATHS)
        response.headers["Content-Security-Policy"] = _DOCS_CSP if is_docs else _API_CSP
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response

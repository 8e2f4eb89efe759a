"""
Exception handlers for FastAPI application.

Every failure leaves the API in the same envelope::

    {"success": false, "error": "<message>", "code": "<MACHINE_CODE>"}

This module provides handlers for:
- Custom application exceptions (AppException)
- Pydantic request validation errors (RequestValidationError)
- Routing errors (Starlette HTTPException: 404, 405)
- Rate limit exceeded (RateLimitExceeded)
- Database connectivity errors (SQLAlchemy OperationalError / InterfaceError)
- Anything else (Exception)
"""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config import settings
from src.core.database import is_connectivity_error, translate_database_error
from src.exceptions import AppException

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_FAILED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMIT_EXCEEDED",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def format_validation_errors(errors: Sequence[Any]) -> str:
    """
    Aggregate pydantic error entries into one message.

    Produces ``Validation error: <field>: <msg>, <field>: <msg>``. Location
    prefixes that name the request part (``body``, ``query``) are dropped.

    Args:
        errors: Output of ``exc.errors()`` from pydantic or FastAPI

    Returns:
        Single human-readable message
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "Validation error: " + ", ".join(parts)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle custom application exceptions.

    Converts AppException to the failure envelope with its status code.
    """
    logger.warning(
        f"Application exception: {exc.error_code} - {exc.message} "
        f"(request_id={_request_id(request)})"
    )

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Malformed input is a client error (400) with an aggregated message.
    """
    message = format_validation_errors(exc.errors())
    logger.warning(f"{message} (request_id={_request_id(request)})")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message, "code": "VALIDATION_ERROR"},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle routing errors (unknown path, method not allowed) and HTTPException."""
    code = _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Endpoint not found"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method not allowed"

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message, "code": code},
        headers=getattr(exc, "headers", None),
    )


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Handle rate limit exceeded errors.

    Must stay synchronous: SlowAPIMiddleware calls the registered handler
    without awaiting it. Returns 429 with the window length as retryAfter.
    """
    retry_after = 60
    limit = getattr(exc, "limit", None)
    if limit is not None and getattr(limit, "limit", None) is not None:
        retry_after = int(limit.limit.get_expiry())

    logger.warning(
        f"Rate limit exceeded: {request.client.host if request.client else 'unknown'} "
        f"(request_id={_request_id(request)})"
    )

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "success": False,
            "error": "Too many requests. Please try again later.",
            "code": "RATE_LIMIT_EXCEEDED",
            "retryAfter": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )


async def database_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate database connectivity failures to 503."""
    error = translate_database_error(exc)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Logs the full error and returns a generic error response to the client.
    Connectivity failures that reach this point are still reported as 503.
    """
    if is_connectivity_error(exc):
        return await database_exception_handler(request, exc)

    logger.error(
        f"Unexpected error: {str(exc)} (request_id={_request_id(request)})",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": (
                str(exc)
                if settings.debug
                else "An unexpected error occurred. Please try again later."
            ),
            "code": "INTERNAL_ERROR",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every handler above to the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(OperationalError, database_exception_handler)
    app.add_exception_handler(InterfaceError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

"""
Integration API routes.

This module provides REST endpoints for:
- Stock quotes (Finnhub, Alpha Vantage)
- Sending e-mail through SMTP
- Google Calendar / Tasks passthrough
- File upload (not implemented)
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Header, Query, Request

from src.api.dependencies import CurrentUser
from src.exceptions import ExternalServiceError, FeatureNotImplementedError
from src.schemas.common import ok
from src.schemas.integrations import SendEmailRequest
from src.services.calendar_service import CalendarService
from src.services.email_service import EmailService
from src.services.quote_service import QuoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/integrations", tags=["Integrations"])


@router.get(
    "/stock-quote",
    summary="Stock quote",
    description="""
    `?symbol=AAPL` returns one quote; `?symbols=AAPL,MSFT` returns a map of
    symbol to quote, with `{error, symbol}` for symbols that failed.
    Quotes are cached for 5 minutes per symbol.
    """,
)
async def stock_quote(
    current_user: CurrentUser,
    symbol: str | None = Query(default=None),
    symbols: str | None = Query(default=None),
    provider: str | None = Query(default="finnhub"),
) -> dict[str, Any]:
    service = QuoteService()
    if symbols:
        return ok(await service.get_quotes(symbols, provider))

    quote = await service.get_quote(symbol, provider)
    return ok(quote.model_dump(mode="json", by_alias=True))


@router.post("/send-email", summary="Send an e-mail")
async def send_email(current_user: CurrentUser, data: SendEmailRequest) -> dict[str, Any]:
    """
    Send a message through the configured SMTP server.

    Returns ``{"sent": false, ...}`` when SMTP is not configured.
    """
    result = await EmailService().send(data.to, data.subject, data.body, data.html)
    if result.error:
        raise ExternalServiceError(message=f"Email delivery failed: {result.error}", service="smtp")

    logger.info(f"User {current_user.id} sent e-mail to {data.to} (sent={result.sent})")
    return ok(result.model_dump(mode="json", by_alias=True, exclude_none=True))


@router.api_route(
    "/google-calendar",
    methods=["GET", "POST", "PUT", "DELETE"],
    summary="Google Calendar and Tasks",
    description="""
    `?action=` one of list-calendars, list-events, get-event, create-event,
    update-event, delete-event, get-colors, list-tasks, create-task.
    The user's Google OAuth access token goes in `X-Google-Access-Token`.
    """,
)
async def google_calendar(
    request: Request,
    current_user: CurrentUser,
    x_google_access_token: Annotated[str | None, Header()] = None,
    action: str | None = Query(default=None),
    body: Any = Body(default=None),
) -> dict[str, Any]:
    service = CalendarService(x_google_access_token)
    result = await service.dispatch(action, request.method, dict(request.query_params), body)
    return ok(result)


@router.post("/upload-file", summary="Upload a file (not implemented)")
async def upload_file(current_user: CurrentUser) -> dict[str, Any]:
    raise FeatureNotImplementedError("File upload is not implemented")

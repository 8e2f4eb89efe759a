"""
Integration request/response schemas (stock quotes, e-mail).
"""

from datetime import datetime

from pydantic import EmailStr, Field

from src.schemas.common import CamelModel


class StockQuote(CamelModel):
    """
    Normalized quote returned by every provider.

    Attributes:
        symbol: Upper-cased ticker
        price: Last price
        change / change_percent: Move since previous close
        high / low / open / previous_close: Day range
        timestamp: When the quote was fetched
        provider: Display name of the provider
        cached: True when served from the in-process cache
    """

    symbol: str
    price: float | None = None
    change: float | None = None
    change_percent: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    previous_close: float | None = None
    timestamp: datetime
    provider: str
    cached: bool = False


class SendEmailRequest(CamelModel):
    to: EmailStr
    subject: str = Field(min_length=1, max_length=998)
    body: str = ""
    html: str | None = None


class SendEmailResult(CamelModel):
    """Outcome of an e-mail send. ``sent`` is False when SMTP is not configured."""

    sent: bool
    message: str | None = None
    message_id: str | None = None
    error: str | None = None

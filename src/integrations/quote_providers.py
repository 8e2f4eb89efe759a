"""
Stock quote providers.

Each provider turns one symbol into the normalized quote fields
(price, change, change_percent, high, low, open, previous_close).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from src.core.config import settings
from src.exceptions import ExternalServiceError, IntegrationNotConfiguredError, InvalidInputError

logger = logging.getLogger(__name__)


def _to_float(value: Any) -> float:
    try:
        return float(str(value).replace("%", ""))
    except (TypeError, ValueError):
        return 0.0


class QuoteProvider(ABC):
    """Base class for a quote API."""

    key: str
    name: str
    env_var: str

    @property
    @abstractmethod
    def api_key(self) -> str | None:
        """Configured API key, or None."""

    @abstractmethod
    def request_args(self, symbol: str, api_key: str) -> tuple[str, dict[str, str]]:
        """URL and query parameters for one quote."""

    @abstractmethod
    def parse(self, data: dict[str, Any]) -> dict[str, float | None]:
        """Normalize the provider payload."""

    def require_api_key(self) -> str:
        """
        Raises:
            IntegrationNotConfiguredError: No key configured
        """
        api_key = self.api_key
        if not api_key:
            raise IntegrationNotConfiguredError(
                message=f"API key not configured for {self.key}. Set {self.env_var} in .env"
            )
        return api_key

    async def fetch(self, symbol: str, timeout: float | None = None) -> dict[str, float | None]:
        """
        Fetch and normalize a quote.

        Raises:
            IntegrationNotConfiguredError: No API key
            ExternalServiceError: Transport failure or upstream error status
        """
        api_key = self.require_api_key()
        url, params = self.request_args(symbol, api_key)
        try:
            async with httpx.AsyncClient(timeout=timeout or settings.http_timeout_seconds) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"{self.name} quote request for {symbol} failed: {e}")
            raise ExternalServiceError(message="Failed to fetch stock quote", service=self.key) from e

        if response.status_code >= 400:
            logger.warning(f"{self.name} returned {response.status_code} for {symbol}")
            raise ExternalServiceError(
                message="Failed to fetch stock quote",
                status_code=response.status_code if response.status_code < 500 else 502,
                service=self.key,
            )
        return self.parse(response.json() or {})


class FinnhubProvider(QuoteProvider):
    key = "finnhub"
    name = "Finnhub"
    env_var = "FINNHUB_API_KEY"

    @property
    def api_key(self) -> str | None:
        return settings.finnhub_api_key

    def request_args(self, symbol: str, api_key: str) -> tuple[str, dict[str, str]]:
        return "https://finnhub.io/api/v1/quote", {"symbol": symbol, "token": api_key}

    def parse(self, data: dict[str, Any]) -> dict[str, float | None]:
        return {
            "price": data.get("c"),
            "change": data.get("d"),
            "change_percent": data.get("dp"),
            "high": data.get("h"),
            "low": data.get("l"),
            "open": data.get("o"),
            "previous_close": data.get("pc"),
        }


class AlphaVantageProvider(QuoteProvider):
    key = "alphavantage"
    name = "Alpha Vantage"
    env_var = "ALPHAVANTAGE_API_KEY"

    @property
    def api_key(self) -> str | None:
        return settings.alphavantage_api_key

    def request_args(self, symbol: str, api_key: str) -> tuple[str, dict[str, str]]:
        return "https://www.alphavantage.co/query", {
            "function": "GLOBAL_QUOTE",
            "symbol": symbol,
            "apikey": api_key,
        }

    def parse(self, data: dict[str, Any]) -> dict[str, float | None]:
        quote = data.get("Global Quote") or {}
        return {
            "price": _to_float(quote.get("05. price")),
            "change": _to_float(quote.get("09. change")),
            "change_percent": _to_float(quote.get("10. change percent")),
            "high": _to_float(quote.get("03. high")),
            "low": _to_float(quote.get("04. low")),
            "open": _to_float(quote.get("02. open")),
            "previous_close": _to_float(quote.get("08. previous close")),
        }


QUOTE_PROVIDERS: dict[str, QuoteProvider] = {
    provider.key: provider for provider in (FinnhubProvider(), AlphaVantageProvider())
}


def get_quote_provider(key: str | None) -> QuoteProvider:
    """
    Raises:
        InvalidInputError: Unknown provider
    """
    provider = QUOTE_PROVIDERS.get((key or "finnhub").lower())
    if provider is None:
        raise InvalidInputError(
            field="provider",
            message="Invalid provider. Use: finnhub or alphavantage",
        )
    return provider

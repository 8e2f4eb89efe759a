"""
Stock quote service with an in-process cache.

Quotes are cached per upper-cased symbol for ``QUOTE_CACHE_TTL_SECONDS``
(5 minutes by default). The cache is process local, has no size bound and
expires entries by timestamp only.
"""

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any

from src.core.config import settings
from src.exceptions import AppException, InvalidInputError
from src.integrations.quote_providers import QuoteProvider, get_quote_provider
from src.schemas.integrations import StockQuote

logger = logging.getLogger(__name__)


class QuoteCache:
    """Symbol -> (stored_at, quote) map with a fixed time-to-live."""

    def __init__(self, ttl_seconds: float):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, tuple[float, StockQuote]] = {}

    def get(self, symbol: str) -> StockQuote | None:
        entry = self._entries.get(symbol.upper())
        if entry is None:
            return None
        stored_at, quote = entry
        if time.monotonic() - stored_at >= self.ttl_seconds:
            return None
        return quote

    def set(self, symbol: str, quote: StockQuote) -> None:
        self._entries[symbol.upper()] = (time.monotonic(), quote)

    def clear(self) -> None:
        self._entries.clear()


quote_cache = QuoteCache(settings.quote_cache_ttl_seconds)


class QuoteService:
    """
    Fetch quotes for one or several symbols.

    Usage:
        quote = await QuoteService().get_quote("aapl")
        quotes = await QuoteService().get_quotes("AAPL,MSFT", provider="alphavantage")
    """

    def __init__(self, cache: QuoteCache | None = None):
        self.cache = cache or quote_cache

    async def get_quote(self, symbol: str | None, provider: str | None = None) -> StockQuote:
        """
        Get one quote, from cache when fresh.

        Raises:
            InvalidInputError: Missing symbol or unknown provider
            IntegrationNotConfiguredError: Provider API key missing
            ExternalServiceError: Provider request failed
        """
        quote_provider = get_quote_provider(provider)
        if not symbol or not symbol.strip():
            raise InvalidInputError(
                field="symbol",
                message="Symbol is required. Use ?symbol=AAPL or ?symbols=AAPL,GOOGL,MSFT",
            )
        quote_provider.require_api_key()
        return await self._fetch(quote_provider, symbol.strip().upper())

    async def get_quotes(self, symbols: str, provider: str | None = None) -> dict[str, Any]:
        """
        Get quotes for a comma-separated symbol list.

        A failing symbol yields ``{"error": ..., "symbol": ...}`` in its slot
        instead of failing the batch. Uncached fetches are spaced by
        ``QUOTE_BATCH_DELAY_SECONDS`` to stay under provider rate limits.

        Returns:
            Mapping of upper-cased symbol to quote (camelCase) or error
        """
        quote_provider = get_quote_provider(provider)
        quote_provider.require_api_key()

        symbol_list = [s.strip().upper() for s in symbols.split(",") if s.strip()]
        results: dict[str, Any] = {}
        for symbol in symbol_list:
            cached = self.cache.get(symbol)
            if cached is not None:
                results[symbol] = self._dump(cached.model_copy(update={"cached": True}))
                continue

            try:
                quote = await self._fetch(quote_provider, symbol)
                results[symbol] = self._dump(quote)
            except AppException as e:
                logger.warning(f"Batch quote for {symbol} failed: {e.message}")
                results[symbol] = {"error": e.message, "symbol": symbol}

            if settings.quote_batch_delay_seconds:
                await asyncio.sleep(settings.quote_batch_delay_seconds)

        return results

    async def _fetch(self, quote_provider: QuoteProvider, symbol: str) -> StockQuote:
        cached = self.cache.get(symbol)
        if cached is not None:
            return cached.model_copy(update={"cached": True})

        fields = await quote_provider.fetch(symbol)
        quote = StockQuote(
            symbol=symbol,
            timestamp=datetime.now(UTC),
            provider=quote_provider.name,
            **fields,
        )
        self.cache.set(symbol, quote)
        logger.debug(f"Fetched {symbol} from {quote_provider.name}")
        return quote

    @staticmethod
    def _dump(quote: StockQuote) -> dict[str, Any]:
        return quote.model_dump(mode="json", by_alias=True)

"""Market data service: cache-first, rate-limited quote and fundamentals lookups."""

import asyncio
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Union

from portfolio_valuation.core.cache import TTLCache
from portfolio_valuation.core.exceptions import UpstreamError
from portfolio_valuation.core.limits import (
    CancellationToken,
    RateLimitedRequester,
    Sleep,
    respectful_delay,
)
from portfolio_valuation.core.symbols import cache_key, normalize_symbol
from portfolio_valuation.core.timezone import now_market
from portfolio_valuation.domain.models import DataKind, Venue
from portfolio_valuation.domain.views import Fundamentals, Quote
from portfolio_valuation.providers.market_data_provider import MarketDataProvider

DEFAULT_QUOTE_TTL_SECONDS = 15
DEFAULT_FUNDAMENTALS_TTL_SECONDS = 12 * 60 * 60


class MarketDataService:
    """
    Service for fetching market data (quotes, fundamentals).

    A cache hit is returned immediately, flagged ``from_cache``, without
    touching the limiter. A miss goes through the rate-limited requester and
    the fresh result is cached with its data kind's TTL.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache: TTLCache[Union[Quote, Fundamentals]],
        requester: RateLimitedRequester,
        quote_ttl_seconds: float = DEFAULT_QUOTE_TTL_SECONDS,
        fundamentals_ttl_seconds: float = DEFAULT_FUNDAMENTALS_TTL_SECONDS,
        politeness_delay: tuple[float, float] = (0.2, 0.4),
        sleep: Sleep = asyncio.sleep,
    ):
        self._provider = provider
        self._cache = cache
        self._requester = requester
        self._quote_ttl = quote_ttl_seconds
        self._fundamentals_ttl = fundamentals_ttl_seconds
        self._politeness_delay = politeness_delay
        self._sleep = sleep

    async def get_quote(
        self,
        symbol: str,
        exchange: Venue,
        token: Optional[CancellationToken] = None,
    ) -> Quote:
        """
        Return the live price for symbol.

        Raises whatever the provider raised once retries are exhausted.
        """
        normalized = normalize_symbol(symbol, exchange)
        key = cache_key(DataKind.QUOTE, normalized, exchange)
        cached = self._cache.get(key)
        if cached is not None:
            return replace(cached, from_cache=True)

        await self._pause()

        async def fetch() -> Decimal:
            price = await self._provider.fetch_quote(normalized, exchange)
            if price is None or price <= 0:
                raise UpstreamError(f"Invalid price for {normalized}: {price}", retryable=False)
            return price

        price = await self._requester.request(fetch, token=token)
        quote = Quote(symbol=normalized, exchange=exchange, price=price, as_of=now_market())
        self._cache.set(key, quote, self._quote_ttl)
        return quote

    async def get_fundamentals(
        self,
        symbol: str,
        exchange: Venue,
        token: Optional[CancellationToken] = None,
    ) -> Fundamentals:
        """Return P/E ratio and latest earnings period for symbol."""
        normalized = normalize_symbol(symbol, exchange)
        key = cache_key(DataKind.FUNDAMENTALS, normalized, exchange)
        cached = self._cache.get(key)
        if cached is not None:
            return replace(cached, from_cache=True)

        await self._pause()
        data = await self._requester.request(
            lambda: self._provider.fetch_fundamentals(normalized, exchange),
            token=token,
        )
        fundamentals = Fundamentals(
            symbol=normalized,
            exchange=exchange,
            pe_ratio=data.pe_ratio,
            latest_earnings=data.latest_earnings,
            as_of=now_market(),
        )
        self._cache.set(key, fundamentals, self._fundamentals_ttl)
        return fundamentals

    async def _pause(self) -> None:
        min_delay, max_delay = self._politeness_delay
        await respectful_delay(min_delay, max_delay, sleep=self._sleep)

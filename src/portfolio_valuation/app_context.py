"""Application context owning the shared cache, limiter and services.

One context is created per running application (in the FastAPI lifespan)
and passed to whatever needs it; nothing here is module-global. Tests build
their own contexts with fake providers, clocks and sleeps.
"""

import asyncio
import contextlib
import logging
import time
from typing import Callable, Optional, Union

from portfolio_valuation.config.settings import Settings, get_settings
from portfolio_valuation.core.cache import TTLCache
from portfolio_valuation.core.limits import ConcurrencyLimiter, RateLimitedRequester, Sleep
from portfolio_valuation.domain.views import Fundamentals, Quote
from portfolio_valuation.providers import (
    MarketDataProvider,
    StubMarketDataProvider,
    YFinanceMarketDataProvider,
)
from portfolio_valuation.services import MarketDataService, PortfolioService

logger = logging.getLogger(__name__)


def build_provider(settings: Settings) -> MarketDataProvider:
    """Create the market data provider selected in settings."""
    if settings.market_data_provider == "yfinance":
        return YFinanceMarketDataProvider()
    return StubMarketDataProvider(latency=settings.stub_latency_seconds)


class AppContext:
    """
    Application context providing access to the shared instances.

    The cache and limiter live exactly as long as the context; ``start()``
    launches the periodic cache sweep and ``close()`` stops it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[MarketDataProvider] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize application context.

        Args:
            settings: Settings to use. Defaults to the global settings.
            provider: Upstream provider. Defaults to the one named in settings.
            clock: Monotonic clock for cache expiry.
            sleep: Async sleep used for backoff and politeness delays.
        """
        self._settings = settings or get_settings()
        self._provider = provider or build_provider(self._settings)
        self._sleep = sleep

        self._cache: TTLCache[Union[Quote, Fundamentals]] = TTLCache(clock=clock)
        self._limiter = ConcurrencyLimiter(
            max_concurrency=self._settings.max_concurrency,
            max_queue_depth=self._settings.max_queue_depth,
        )
        self._requester = RateLimitedRequester(
            self._limiter,
            max_attempts=self._settings.retry_max_attempts,
            base_delay=self._settings.retry_base_delay_seconds,
            max_delay=self._settings.retry_max_delay_seconds,
            sleep=sleep,
        )

        # Service instances (lazy initialized)
        self._market_data_service: Optional[MarketDataService] = None
        self._portfolio_service: Optional[PortfolioService] = None

        self._sweeper: Optional[asyncio.Task] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> TTLCache[Union[Quote, Fundamentals]]:
        return self._cache

    @property
    def limiter(self) -> ConcurrencyLimiter:
        return self._limiter

    @property
    def provider(self) -> MarketDataProvider:
        return self._provider

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data_service is None:
            self._market_data_service = MarketDataService(
                provider=self._provider,
                cache=self._cache,
                requester=self._requester,
                quote_ttl_seconds=self._settings.quote_cache_ttl_seconds,
                fundamentals_ttl_seconds=self._settings.fundamentals_cache_ttl_seconds,
                politeness_delay=(
                    self._settings.politeness_delay_min_seconds,
                    self._settings.politeness_delay_max_seconds,
                ),
                sleep=self._sleep,
            )
        return self._market_data_service

    @property
    def portfolio(self) -> PortfolioService:
        """Get the PortfolioService instance."""
        if self._portfolio_service is None:
            self._portfolio_service = PortfolioService(
                market_data_service=self.market_data,
                seed_path=self._settings.get_seed_holdings_path(),
            )
        return self._portfolio_service

    async def start(self) -> None:
        """Start background maintenance."""
        interval = self._settings.cache_sweep_interval_seconds
        if interval > 0 and self._sweeper is None:
            self._sweeper = asyncio.create_task(self._sweep_cache(interval))

    async def close(self) -> None:
        """Stop background maintenance and drop cached data."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None
        self._cache.clear()

    async def _sweep_cache(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            removed = self._cache.cleanup()
            if removed:
                logger.debug("Cache sweep removed %d expired entries", removed)

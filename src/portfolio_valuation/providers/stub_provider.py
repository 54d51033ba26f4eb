"""Stub market data provider for offline/testing use."""

import asyncio
import random
from decimal import Decimal

from portfolio_valuation.core.exceptions import UpstreamError
from portfolio_valuation.domain.models import Venue
from portfolio_valuation.domain.views import FundamentalsData


# Deterministic fake prices for common NSE symbols
_STUB_PRICES: dict[str, Decimal] = {
    "RELIANCE": Decimal("2945.60"),
    "TCS": Decimal("4120.35"),
    "HDFCBANK": Decimal("1652.80"),
    "INFY": Decimal("1875.10"),
    "ICICIBANK": Decimal("1284.45"),
    "ITC": Decimal("498.20"),
    "BHARTIARTL": Decimal("1590.75"),
    "AXISBANK": Decimal("1172.30"),
    "MARUTI": Decimal("12650.00"),
    "SUNPHARMA": Decimal("1810.55"),
    "WIPRO": Decimal("548.90"),
    "TITAN": Decimal("3560.25"),
}

_BASE_PRICE = 1000
_QUARTERS = ("Q1", "Q2", "Q3", "Q4")
_FISCAL_YEARS = ("2024", "2025")


class StubMarketDataProvider:
    """
    Stub provider with mocked values for offline operation.

    Uses predefined prices for common symbols and seeded random prices
    around 1000 (+/-10%) for unknown ones. ``failure_rate`` injects
    transient failures; ``latency`` simulates a slow upstream.
    """

    def __init__(self, seed: int = 42, latency: float = 0.0, failure_rate: float = 0.0):
        """Initialize with optional random seed for reproducibility."""
        self._rng = random.Random(seed)
        self._latency = latency
        self._failure_rate = failure_rate

    async def fetch_quote(self, symbol: str, exchange: Venue) -> Decimal:
        """Return a stub price for the symbol."""
        await self._simulate_upstream(symbol)
        if symbol in _STUB_PRICES:
            return _STUB_PRICES[symbol]
        variation = (self._rng.random() - 0.5) * 0.2
        return Decimal(round(_BASE_PRICE * (1 + variation)))

    async def fetch_fundamentals(self, symbol: str, exchange: Venue) -> FundamentalsData:
        """Return a stub P/E ratio and earnings period."""
        await self._simulate_upstream(symbol)
        pe_ratio = Decimal(str(round(self._rng.random() * 40 + 10, 1)))
        quarter = self._rng.choice(_QUARTERS)
        year = self._rng.choice(_FISCAL_YEARS)
        return FundamentalsData(pe_ratio=pe_ratio, latest_earnings=f"{quarter} FY{year}")

    async def _simulate_upstream(self, symbol: str) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        if self._failure_rate and self._rng.random() < self._failure_rate:
            raise UpstreamError(f"Simulated upstream failure for {symbol}")

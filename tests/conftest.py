"""
Pytest configuration and fixtures for the portfolio valuation tests.

This module provides:
- Fake clock and fake async sleep for deterministic timing
- Deterministic, flaky and failing market data providers
- Settings, AppContext and service fixtures
- Factory helpers for raw and validated holdings
- FastAPI test client wired to a test AppContext
"""

import asyncio
from decimal import Decimal
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from portfolio_valuation.main import app
from portfolio_valuation.api.deps import get_app_context
from portfolio_valuation.app_context import AppContext
from portfolio_valuation.config.settings import Settings, reset_settings
from portfolio_valuation.core.exceptions import UpstreamError
from portfolio_valuation.domain.models import Holding, Venue
from portfolio_valuation.domain.views import FundamentalsData


@pytest.fixture
def anyio_backend() -> str:
    """Run coroutine tests on asyncio only."""
    return "asyncio"


# =============================================================================
# TIME HELPERS
# =============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSleep:
    """Async sleep that records requested delays and only yields to the loop."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Provides fixed prices and fundamentals with no randomness and counts
    every upstream call. Symbols listed in ``failing_quotes`` or
    ``failing_fundamentals`` raise ConnectionError.
    """

    FIXED_PRICES = {
        "X": Decimal("120"),
        "RELIANCE": Decimal("2945.60"),
        "TCS": Decimal("4120.35"),
        "INFY": Decimal("1875.10"),
        "HDFCBANK": Decimal("1652.80"),
        "ITC": Decimal("498.20"),
    }

    def __init__(
        self,
        failing_quotes: Optional[set[str]] = None,
        failing_fundamentals: Optional[set[str]] = None,
    ):
        self.failing_quotes = failing_quotes or set()
        self.failing_fundamentals = failing_fundamentals or set()
        self.quote_calls: list[str] = []
        self.fundamentals_calls: list[str] = []

    async def fetch_quote(self, symbol: str, exchange: Venue) -> Decimal:
        self.quote_calls.append(symbol)
        await asyncio.sleep(0)
        if symbol in self.failing_quotes:
            raise ConnectionError(f"quote upstream down for {symbol}")
        return self.FIXED_PRICES.get(symbol, Decimal("100"))

    async def fetch_fundamentals(self, symbol: str, exchange: Venue) -> FundamentalsData:
        self.fundamentals_calls.append(symbol)
        await asyncio.sleep(0)
        if symbol in self.failing_fundamentals:
            raise ConnectionError(f"fundamentals upstream down for {symbol}")
        return FundamentalsData(pe_ratio=Decimal("24.5"), latest_earnings="Q2 FY2025")


class FlakyMarketProvider(DeterministicMarketProvider):
    """Fails the first ``failures`` calls of each kind, then behaves."""

    def __init__(self, failures: int):
        super().__init__()
        self._remaining = {"quote": failures, "fundamentals": failures}

    async def fetch_quote(self, symbol: str, exchange: Venue) -> Decimal:
        if self._remaining["quote"] > 0:
            self._remaining["quote"] -= 1
            self.quote_calls.append(symbol)
            raise UpstreamError("rate limited")
        return await super().fetch_quote(symbol, exchange)

    async def fetch_fundamentals(self, symbol: str, exchange: Venue) -> FundamentalsData:
        if self._remaining["fundamentals"] > 0:
            self._remaining["fundamentals"] -= 1
            self.fundamentals_calls.append(symbol)
            raise UpstreamError("rate limited")
        return await super().fetch_fundamentals(symbol, exchange)


class FailingMarketProvider:
    """Market provider that always raises an exception."""

    def __init__(self):
        self.calls = 0

    async def fetch_quote(self, symbol: str, exchange: Venue) -> Decimal:
        self.calls += 1
        raise ConnectionError("Network unavailable")

    async def fetch_fundamentals(self, symbol: str, exchange: Venue) -> FundamentalsData:
        self.calls += 1
        raise ConnectionError("Network unavailable")


@pytest.fixture
def deterministic_provider() -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a market provider that always fails."""
    return FailingMarketProvider()


# =============================================================================
# SETTINGS AND CONTEXT FIXTURES
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with politeness delays and the background sweep disabled."""
    reset_settings()
    return Settings(
        politeness_delay_min_seconds=0,
        politeness_delay_max_seconds=0,
        cache_sweep_interval_seconds=0,
    )


def build_context(
    settings: Settings,
    provider: Any,
    clock: FakeClock,
    sleep: FakeSleep,
) -> AppContext:
    """Helper to build an AppContext around a test provider."""
    return AppContext(settings=settings, provider=provider, clock=clock, sleep=sleep)


@pytest.fixture
def app_context(test_settings, deterministic_provider, fake_clock, fake_sleep) -> AppContext:
    """Provide a fresh AppContext backed by the deterministic provider."""
    return build_context(test_settings, deterministic_provider, fake_clock, fake_sleep)


@pytest.fixture
def market_data_service(app_context):
    return app_context.market_data


@pytest.fixture
def portfolio_service(app_context):
    return app_context.portfolio


# =============================================================================
# FACTORY HELPERS
# =============================================================================


def raw_holding(
    symbol: str = "X",
    name: Optional[str] = None,
    sector: str = "Technology",
    purchase_price: Any = 100,
    qty: Any = 10,
    exchange: str = "NSE",
) -> dict:
    """Helper to create a raw holding payload."""
    return {
        "symbol": symbol,
        "name": name or f"{symbol} Ltd",
        "sector": sector,
        "purchase_price": purchase_price,
        "qty": qty,
        "exchange": exchange,
    }


def make_holding(
    symbol: str = "X",
    sector: str = "Technology",
    purchase_price: str = "100",
    qty: str = "10",
    exchange: Venue = Venue.NSE,
) -> Holding:
    """Helper to create a validated Holding."""
    return Holding(
        symbol=symbol,
        name=f"{symbol} Ltd",
        sector=sector,
        purchase_price=Decimal(purchase_price),
        qty=Decimal(qty),
        exchange=exchange,
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(app_context) -> TestClient:
    """Provide FastAPI test client bound to the test AppContext."""
    app.dependency_overrides[get_app_context] = lambda: app_context
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

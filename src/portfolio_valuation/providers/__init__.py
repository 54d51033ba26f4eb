"""Market data providers module."""

from portfolio_valuation.providers.market_data_provider import MarketDataProvider
from portfolio_valuation.providers.stub_provider import StubMarketDataProvider
from portfolio_valuation.providers.yfinance_provider import YFinanceMarketDataProvider

__all__ = [
    "MarketDataProvider",
    "StubMarketDataProvider",
    "YFinanceMarketDataProvider",
]

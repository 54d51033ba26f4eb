"""Market data provider protocol."""

from decimal import Decimal
from typing import Protocol

from portfolio_valuation.domain.models import Venue
from portfolio_valuation.domain.views import FundamentalsData


class MarketDataProvider(Protocol):
    """
    Protocol for upstream market data providers.

    Any call may fail or be slow. Implementations raise ``UpstreamError``
    tagged ``retryable=False`` for failures that retrying cannot fix, and
    anything else for transient ones.
    """

    async def fetch_quote(self, symbol: str, exchange: Venue) -> Decimal:
        """Return the current market price for a normalized symbol."""
        ...

    async def fetch_fundamentals(self, symbol: str, exchange: Venue) -> FundamentalsData:
        """Return P/E ratio and latest earnings period for a normalized symbol."""
        ...

"""
Yahoo Finance market data provider via yfinance.

yfinance is blocking, so each lookup runs in a worker thread. Network
failures surface as retryable ``UpstreamError``; a symbol Yahoo has no data
for is a permanent one.
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from portfolio_valuation.core.exceptions import UpstreamError
from portfolio_valuation.core.symbols import to_yahoo_symbol
from portfolio_valuation.domain.models import Venue
from portfolio_valuation.domain.views import FundamentalsData


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _quarter_label(epoch_seconds: Any) -> Optional[str]:
    """Format Yahoo's mostRecentQuarter timestamp as e.g. ``Q2 2025``."""
    if not isinstance(epoch_seconds, (int, float)):
        return None
    dt = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return f"Q{(dt.month - 1) // 3 + 1} {dt.year}"


class YFinanceMarketDataProvider:
    """Fetches live prices and fundamentals from Yahoo Finance."""

    def _load_info(self, yahoo_symbol: str) -> dict[str, Any]:
        yf = _get_yf()
        try:
            info = yf.Ticker(yahoo_symbol).info
        except Exception as exc:
            raise UpstreamError(f"Yahoo Finance request failed for {yahoo_symbol}: {exc}") from exc
        if not isinstance(info, dict) or not info:
            raise UpstreamError(f"No data from Yahoo Finance for {yahoo_symbol}", retryable=False)
        return info

    async def fetch_quote(self, symbol: str, exchange: Venue) -> Decimal:
        yahoo_symbol = to_yahoo_symbol(symbol, exchange)
        info = await asyncio.to_thread(self._load_info, yahoo_symbol)
        # currentPrice preferred, then regularMarketPrice
        price = _to_decimal(info.get("currentPrice") or info.get("regularMarketPrice"))
        if price is None:
            raise UpstreamError(f"No price available for {yahoo_symbol}", retryable=False)
        return price

    async def fetch_fundamentals(self, symbol: str, exchange: Venue) -> FundamentalsData:
        yahoo_symbol = to_yahoo_symbol(symbol, exchange)
        info = await asyncio.to_thread(self._load_info, yahoo_symbol)
        return FundamentalsData(
            pe_ratio=_to_decimal(info.get("trailingPE")),
            latest_earnings=_quarter_label(info.get("mostRecentQuarter")),
        )

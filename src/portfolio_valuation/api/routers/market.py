"""Single-symbol market data endpoints."""

from fastapi import APIRouter, Depends, Query

from portfolio_valuation.api.deps import get_market_data_service
from portfolio_valuation.api.schemas import MetricsResponse, QuoteResponse
from portfolio_valuation.core.exceptions import AppError, UpstreamError
from portfolio_valuation.domain.models import Venue
from portfolio_valuation.services import MarketDataService

router = APIRouter(tags=["market"])


@router.get("/quote", response_model=QuoteResponse)
async def get_quote(
    symbol: str = Query(..., min_length=1, description="Exchange ticker, e.g. RELIANCE"),
    exchange: Venue = Query(..., description="NSE or BSE"),
    market: MarketDataService = Depends(get_market_data_service),
) -> QuoteResponse:
    """Get the live price for one symbol."""
    try:
        quote = await market.get_quote(symbol, exchange)
    except AppError:
        raise
    except Exception as exc:
        raise UpstreamError(f"Failed to fetch quote for {symbol}: {exc}") from exc

    return QuoteResponse(
        symbol=quote.symbol,
        exchange=quote.exchange,
        price=quote.price,
        from_cache=quote.from_cache,
        as_of=quote.as_of,
    )


@router.get("/metrics", response_model=MetricsResponse)
async def get_metrics(
    symbol: str = Query(..., min_length=1, description="Exchange ticker, e.g. RELIANCE"),
    exchange: Venue = Query(..., description="NSE or BSE"),
    market: MarketDataService = Depends(get_market_data_service),
) -> MetricsResponse:
    """Get P/E ratio and latest earnings period for one symbol."""
    try:
        fundamentals = await market.get_fundamentals(symbol, exchange)
    except AppError:
        raise
    except Exception as exc:
        raise UpstreamError(f"Failed to fetch metrics for {symbol}: {exc}") from exc

    return MetricsResponse(
        symbol=fundamentals.symbol,
        exchange=fundamentals.exchange,
        pe_ratio=fundamentals.pe_ratio,
        latest_earnings=fundamentals.latest_earnings,
        from_cache=fundamentals.from_cache,
        as_of=fundamentals.as_of,
    )

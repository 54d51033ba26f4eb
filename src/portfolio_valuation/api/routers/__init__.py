"""API routers package."""

from portfolio_valuation.api.routers.portfolio import router as portfolio_router
from portfolio_valuation.api.routers.market import router as market_router

__all__ = [
    "portfolio_router",
    "market_router",
]

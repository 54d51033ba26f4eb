"""Service layer - business logic orchestration."""

from portfolio_valuation.services.market_data_service import MarketDataService
from portfolio_valuation.services.portfolio_service import PortfolioService

__all__ = [
    "MarketDataService",
    "PortfolioService",
]

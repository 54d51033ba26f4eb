"""Dependency injection for FastAPI."""

from fastapi import Depends, Request

from portfolio_valuation.app_context import AppContext
from portfolio_valuation.services import MarketDataService, PortfolioService


def get_app_context(request: Request) -> AppContext:
    """Provide the AppContext created at startup."""
    return request.app.state.context


def get_market_data_service(
    context: AppContext = Depends(get_app_context),
) -> MarketDataService:
    """Provide MarketDataService instance."""
    return context.market_data


def get_portfolio_service(
    context: AppContext = Depends(get_app_context),
) -> PortfolioService:
    """Provide PortfolioService instance."""
    return context.portfolio

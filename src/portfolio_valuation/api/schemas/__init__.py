"""Pydantic schemas for API request/response."""

from portfolio_valuation.api.schemas.portfolio import (
    HoldingResponse,
    TotalsResponse,
    SectorResponse,
    PortfolioResponse,
)
from portfolio_valuation.api.schemas.market import (
    QuoteResponse,
    MetricsResponse,
    HealthResponse,
)

__all__ = [
    "HoldingResponse",
    "TotalsResponse",
    "SectorResponse",
    "PortfolioResponse",
    "QuoteResponse",
    "MetricsResponse",
    "HealthResponse",
]

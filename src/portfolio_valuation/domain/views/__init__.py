"""View models for service outputs."""

from portfolio_valuation.domain.views.market import (
    FundamentalsData,
    Quote,
    Fundamentals,
)
from portfolio_valuation.domain.views.portfolio import (
    ValuationTotals,
    SectorSummary,
    PortfolioView,
)

__all__ = [
    "FundamentalsData",
    "Quote",
    "Fundamentals",
    "ValuationTotals",
    "SectorSummary",
    "PortfolioView",
]

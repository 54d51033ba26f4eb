"""View models for portfolio valuation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_valuation.domain.models.holding import EnrichedHolding


@dataclass(frozen=True)
class ValuationTotals:
    """
    Folded totals for a sector or the whole portfolio.

    ``present_value`` is None when no member has a live price; members
    without one are skipped rather than counted as zero.
    """

    investment: Decimal
    present_value: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    gain_loss_percent: Optional[Decimal] = None


@dataclass(frozen=True)
class SectorSummary:
    """Holdings of one sector with their totals."""

    sector: str
    holdings: list[EnrichedHolding]
    totals: ValuationTotals


@dataclass(frozen=True)
class PortfolioView:
    """Enriched portfolio with sector and portfolio-wide totals."""

    holdings: list[EnrichedHolding]
    totals: ValuationTotals
    sectors: dict[str, SectorSummary] = field(default_factory=dict)
    last_updated: Optional[datetime] = None

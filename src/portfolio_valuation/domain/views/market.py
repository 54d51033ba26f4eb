"""View models for upstream market data."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_valuation.domain.models.enums import Venue


@dataclass(frozen=True)
class FundamentalsData:
    """Fundamentals as returned by a provider."""

    pe_ratio: Optional[Decimal] = None
    latest_earnings: Optional[str] = None


@dataclass(frozen=True)
class Quote:
    """Live price for a symbol."""

    symbol: str
    exchange: Venue
    price: Decimal
    as_of: datetime
    from_cache: bool = False


@dataclass(frozen=True)
class Fundamentals:
    """Valuation ratio and reporting period for a symbol."""

    symbol: str
    exchange: Venue
    pe_ratio: Optional[Decimal]
    latest_earnings: Optional[str]
    as_of: datetime
    from_cache: bool = False

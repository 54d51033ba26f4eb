"""Holding models: raw positions and their enriched derivatives."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from portfolio_valuation.domain.models.enums import Venue


@dataclass(frozen=True)
class Holding:
    """
    A validated portfolio position as supplied by the caller.

    Immutable once accepted; enrichment builds new records instead.
    """

    symbol: str
    name: str
    sector: str
    purchase_price: Decimal
    qty: Decimal
    exchange: Venue


@dataclass(frozen=True)
class EnrichedHolding(Holding):
    """
    Holding plus static and live-data derived fields.

    Live fields are None when the corresponding fetch failed.
    ``stale`` is True when the price was served from cache.
    ``portfolio_percent`` is filled once the whole batch is known.
    """

    investment: Decimal = Decimal("0")
    current_price: Optional[Decimal] = None
    present_value: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    gain_loss_percent: Optional[Decimal] = None
    pe_ratio: Optional[Decimal] = None
    latest_earnings: Optional[str] = None
    stale: bool = False
    portfolio_percent: Optional[Decimal] = None

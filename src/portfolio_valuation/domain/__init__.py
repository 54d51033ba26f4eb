"""Domain layer - pure business models with no external dependencies."""

from portfolio_valuation.domain.models import (
    Venue,
    DataKind,
    Holding,
    EnrichedHolding,
)

__all__ = [
    "Venue",
    "DataKind",
    "Holding",
    "EnrichedHolding",
]

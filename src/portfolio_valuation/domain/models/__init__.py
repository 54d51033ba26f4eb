"""Domain models package."""

from portfolio_valuation.domain.models.enums import Venue, DataKind
from portfolio_valuation.domain.models.holding import Holding, EnrichedHolding

__all__ = [
    "Venue",
    "DataKind",
    "Holding",
    "EnrichedHolding",
]

"""Validation model for raw holding records."""

from decimal import Decimal

from pydantic import BaseModel, Field

from portfolio_valuation.domain.models import Holding, Venue


class HoldingInput(BaseModel):
    """One raw holding as supplied by a caller or the seed dataset."""

    symbol: str = Field(min_length=1)
    name: str = Field(min_length=1)
    sector: str = Field(min_length=1)
    purchase_price: Decimal = Field(gt=0)
    qty: Decimal = Field(gt=0)
    exchange: Venue

    def to_holding(self) -> Holding:
        return Holding(
            symbol=self.symbol,
            name=self.name,
            sector=self.sector,
            purchase_price=self.purchase_price,
            qty=self.qty,
            exchange=self.exchange,
        )

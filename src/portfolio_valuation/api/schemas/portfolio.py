"""Pydantic schemas for portfolio endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from portfolio_valuation.domain.models import Venue


class HoldingResponse(BaseModel):
    """Response schema for an enriched holding."""

    symbol: str
    name: str
    sector: str
    purchase_price: Decimal
    qty: Decimal
    exchange: Venue
    investment: Decimal
    current_price: Optional[Decimal] = None
    present_value: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    gain_loss_percent: Optional[Decimal] = None
    pe_ratio: Optional[Decimal] = None
    latest_earnings: Optional[str] = None
    stale: bool = False
    portfolio_percent: Optional[Decimal] = None


class TotalsResponse(BaseModel):
    """Response schema for sector or portfolio totals."""

    investment: Decimal
    present_value: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    gain_loss_percent: Optional[Decimal] = None


class SectorResponse(BaseModel):
    """Response schema for one sector group."""

    holdings: list[HoldingResponse]
    totals: TotalsResponse


class PortfolioResponse(BaseModel):
    """Response schema for the valued portfolio."""

    holdings: list[HoldingResponse]
    totals: TotalsResponse
    sectors: dict[str, SectorResponse]
    last_updated: Optional[datetime] = None

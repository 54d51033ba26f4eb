"""Pydantic schemas for single-symbol market data endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from portfolio_valuation.domain.models import Venue


class QuoteResponse(BaseModel):
    """Response schema for a live quote."""

    symbol: str
    exchange: Venue
    price: Decimal
    from_cache: bool
    as_of: datetime


class MetricsResponse(BaseModel):
    """Response schema for fundamentals."""

    symbol: str
    exchange: Venue
    pe_ratio: Optional[Decimal] = None
    latest_earnings: Optional[str] = None
    from_cache: bool
    as_of: datetime


class HealthResponse(BaseModel):
    """Response schema for the health check."""

    status: str
    cache_entries: int
    upstream_running: int
    upstream_pending: int

"""Portfolio valuation endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from portfolio_valuation.api.deps import get_portfolio_service
from portfolio_valuation.api.schemas import (
    HoldingResponse,
    PortfolioResponse,
    SectorResponse,
    TotalsResponse,
)
from portfolio_valuation.domain.models import EnrichedHolding
from portfolio_valuation.domain.views import PortfolioView, ValuationTotals
from portfolio_valuation.services import PortfolioService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


def _holding_response(h: EnrichedHolding) -> HoldingResponse:
    return HoldingResponse(
        symbol=h.symbol,
        name=h.name,
        sector=h.sector,
        purchase_price=h.purchase_price,
        qty=h.qty,
        exchange=h.exchange,
        investment=h.investment,
        current_price=h.current_price,
        present_value=h.present_value,
        gain_loss=h.gain_loss,
        gain_loss_percent=h.gain_loss_percent,
        pe_ratio=h.pe_ratio,
        latest_earnings=h.latest_earnings,
        stale=h.stale,
        portfolio_percent=h.portfolio_percent,
    )


def _totals_response(t: ValuationTotals) -> TotalsResponse:
    return TotalsResponse(
        investment=t.investment,
        present_value=t.present_value,
        gain_loss=t.gain_loss,
        gain_loss_percent=t.gain_loss_percent,
    )


def _portfolio_response(view: PortfolioView) -> PortfolioResponse:
    return PortfolioResponse(
        holdings=[_holding_response(h) for h in view.holdings],
        totals=_totals_response(view.totals),
        sectors={
            name: SectorResponse(
                holdings=[_holding_response(h) for h in summary.holdings],
                totals=_totals_response(summary.totals),
            )
            for name, summary in view.sectors.items()
        },
        last_updated=view.last_updated,
    )


async def _read_body(request: Request) -> Optional[Any]:
    """Parsed JSON body, or None when it is missing or unparseable."""
    try:
        return await request.json()
    except ValueError:
        logger.info("No usable request body, valuing seed holdings")
        return None


@router.post("", response_model=PortfolioResponse)
async def value_portfolio(
    request: Request,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """
    Value holdings against live market data.

    Body: JSON array of holdings. Without a usable body the seed dataset is
    valued instead. Any invalid holding rejects the whole batch.
    """
    raw_holdings = await _read_body(request)
    view = await service.value_portfolio(raw_holdings)
    return _portfolio_response(view)


@router.get("", response_model=PortfolioResponse)
def get_static_portfolio(
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Seed holdings with static fields only; no market data is fetched."""
    return _portfolio_response(service.static_portfolio())

"""Valuation arithmetic and sector/portfolio aggregation."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal, localcontext
from typing import Optional

from portfolio_valuation.domain.models import EnrichedHolding, Holding
from portfolio_valuation.domain.views import PortfolioView, SectorSummary, ValuationTotals

PERCENT_QUANTUM = Decimal("0.01")


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    ratio = part / whole * 100
    # quantize needs room for every integer digit plus two decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, ratio.adjusted() + 3)
        return ratio.quantize(PERCENT_QUANTUM)


def compute_investment(holding: Holding) -> Decimal:
    return holding.purchase_price * holding.qty


def compute_present_value(price: Optional[Decimal], qty: Decimal) -> Optional[Decimal]:
    if price is None:
        return None
    return price * qty


def compute_gain_loss(present_value: Optional[Decimal], investment: Decimal) -> Optional[Decimal]:
    if present_value is None:
        return None
    return present_value - investment


def compute_gain_loss_percent(gain_loss: Optional[Decimal], investment: Decimal) -> Optional[Decimal]:
    if gain_loss is None or investment <= 0:
        return None
    return _percent(gain_loss, investment)


def compute_portfolio_percent(investment: Decimal, total_investment: Decimal) -> Optional[Decimal]:
    if total_investment <= 0:
        return None
    return _percent(investment, total_investment)


def to_static(holding: Holding) -> EnrichedHolding:
    """Enriched record carrying only fields that need no live data."""
    return EnrichedHolding(
        symbol=holding.symbol,
        name=holding.name,
        sector=holding.sector,
        purchase_price=holding.purchase_price,
        qty=holding.qty,
        exchange=holding.exchange,
        investment=compute_investment(holding),
    )


def compute_totals(holdings: list[EnrichedHolding]) -> ValuationTotals:
    """
    Fold holdings into investment / present value / gain-loss totals.

    Present value sums only members that have one, and is None when none do.
    """
    investment = sum((h.investment for h in holdings), Decimal("0"))
    present_values = [h.present_value for h in holdings if h.present_value is not None]
    present_value = sum(present_values, Decimal("0")) if present_values else None
    gain_loss = compute_gain_loss(present_value, investment)
    return ValuationTotals(
        investment=investment,
        present_value=present_value,
        gain_loss=gain_loss,
        gain_loss_percent=compute_gain_loss_percent(gain_loss, investment),
    )


def group_by_sector(holdings: list[EnrichedHolding]) -> dict[str, list[EnrichedHolding]]:
    groups: dict[str, list[EnrichedHolding]] = {}
    for holding in holdings:
        groups.setdefault(holding.sector, []).append(holding)
    return groups


def with_portfolio_percent(holdings: list[EnrichedHolding], total_investment: Decimal) -> list[EnrichedHolding]:
    return [
        replace(h, portfolio_percent=compute_portfolio_percent(h.investment, total_investment))
        for h in holdings
    ]


def summarize(holdings: list[EnrichedHolding], last_updated: Optional[datetime] = None) -> PortfolioView:
    """
    Build the portfolio view: portfolio shares, sector groups and totals.

    Input order is preserved in ``holdings`` and within each sector.
    """
    totals = compute_totals(holdings)
    holdings = with_portfolio_percent(holdings, totals.investment)
    sectors = {
        sector: SectorSummary(sector=sector, holdings=members, totals=compute_totals(members))
        for sector, members in group_by_sector(holdings).items()
    }
    return PortfolioView(
        holdings=holdings,
        totals=totals,
        sectors=sectors,
        last_updated=last_updated,
    )

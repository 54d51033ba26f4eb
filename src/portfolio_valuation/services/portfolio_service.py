"""Portfolio service: validation, live-data enrichment and aggregation."""

import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from portfolio_valuation.core.exceptions import ValidationError
from portfolio_valuation.core.limits import CancellationToken
from portfolio_valuation.core.timezone import now_market
from portfolio_valuation.domain.models import EnrichedHolding, Holding
from portfolio_valuation.domain.views import PortfolioView
from portfolio_valuation.services.holding_input import HoldingInput
from portfolio_valuation.services.market_data_service import MarketDataService
from portfolio_valuation.services.valuation import (
    compute_gain_loss,
    compute_gain_loss_percent,
    compute_present_value,
    summarize,
    to_static,
)

logger = logging.getLogger(__name__)


def _describe(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'holding'}: {err['msg']}"
        for err in exc.errors()
    )


class PortfolioService:
    """
    Values a portfolio against live market data.

    Every holding's quote and fundamentals are fetched concurrently. A failed
    fetch leaves only that holding's live fields empty; it never fails the
    batch or cancels sibling fetches.
    """

    def __init__(self, market_data_service: MarketDataService, seed_path: Path):
        self._market = market_data_service
        self._seed_path = seed_path

    def load_seed(self) -> list[Any]:
        """Read the fallback holdings dataset."""
        with open(self._seed_path, encoding="utf-8") as f:
            return json.load(f)

    def validate(self, raw_holdings: Any) -> list[Holding]:
        """
        Validate raw records into holdings.

        Raises:
            ValidationError: if the payload is not a list or any record is
                invalid. The whole batch is rejected; the error names the
                first offending index.
        """
        if not isinstance(raw_holdings, list):
            raise ValidationError("Expected a JSON array of holdings")

        holdings: list[Holding] = []
        for index, raw in enumerate(raw_holdings):
            try:
                data = HoldingInput.model_validate(raw)
            except PydanticValidationError as exc:
                raise ValidationError(
                    f"Invalid holding at index {index}: {_describe(exc)}",
                    index=index,
                ) from exc
            holdings.append(data.to_holding())
        return holdings

    async def enrich(
        self,
        holdings: list[Holding],
        token: Optional[CancellationToken] = None,
    ) -> list[EnrichedHolding]:
        """Enrich every holding with live data, preserving input order."""
        results = await asyncio.gather(
            *(self._enrich_one(holding, token) for holding in holdings),
            return_exceptions=True,
        )

        enriched: list[EnrichedHolding] = []
        for holding, result in zip(holdings, results):
            if isinstance(result, BaseException):
                logger.error("Enrichment failed for %s: %s", holding.symbol, result)
                enriched.append(to_static(holding))
            else:
                enriched.append(result)
        return enriched

    async def value_portfolio(
        self,
        raw_holdings: Optional[Any] = None,
        token: Optional[CancellationToken] = None,
    ) -> PortfolioView:
        """
        Validate, enrich and aggregate a batch of raw holdings.

        ``None`` selects the seed dataset.
        """
        if raw_holdings is None:
            raw_holdings = self.load_seed()
        holdings = self.validate(raw_holdings)
        enriched = await self.enrich(holdings, token=token)
        return summarize(enriched, last_updated=now_market())

    def static_portfolio(self) -> PortfolioView:
        """Seed dataset valued with static fields only (no upstream calls)."""
        holdings = self.validate(self.load_seed())
        return summarize([to_static(h) for h in holdings], last_updated=now_market())

    async def _enrich_one(
        self,
        holding: Holding,
        token: Optional[CancellationToken],
    ) -> EnrichedHolding:
        record = to_static(holding)
        quote, fundamentals = await asyncio.gather(
            self._market.get_quote(holding.symbol, holding.exchange, token=token),
            self._market.get_fundamentals(holding.symbol, holding.exchange, token=token),
            return_exceptions=True,
        )

        if isinstance(quote, BaseException):
            logger.warning("Quote unavailable for %s: %s", holding.symbol, quote)
        else:
            present_value = compute_present_value(quote.price, holding.qty)
            gain_loss = compute_gain_loss(present_value, record.investment)
            record = replace(
                record,
                current_price=quote.price,
                present_value=present_value,
                gain_loss=gain_loss,
                stale=quote.from_cache,
            )
            try:
                record = replace(
                    record,
                    gain_loss_percent=compute_gain_loss_percent(gain_loss, record.investment),
                )
            except ArithmeticError as exc:
                logger.warning("Gain/loss percent unavailable for %s: %s", holding.symbol, exc)

        if isinstance(fundamentals, BaseException):
            logger.warning("Fundamentals unavailable for %s: %s", holding.symbol, fundamentals)
        else:
            record = replace(
                record,
                pe_ratio=fundamentals.pe_ratio,
                latest_earnings=fundamentals.latest_earnings,
            )

        return record

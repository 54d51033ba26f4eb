"""Unit tests for raw holding validation and service-layer dependencies."""

import ast
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

import portfolio_valuation.services as services_pkg
from portfolio_valuation.domain.models import Holding, Venue
from portfolio_valuation.services.holding_input import HoldingInput

from tests.conftest import raw_holding


class TestHoldingInput:
    """Tests for HoldingInput."""

    def test_converts_to_domain_holding(self):
        holding = HoldingInput.model_validate(
            raw_holding("TCS", purchase_price="3200.50", qty=2, exchange="BSE")
        ).to_holding()

        assert isinstance(holding, Holding)
        assert holding.purchase_price == Decimal("3200.50")
        assert holding.qty == Decimal("2")
        assert holding.exchange == Venue.BSE

    def test_rejects_non_positive_quantity(self):
        with pytest.raises(PydanticValidationError):
            HoldingInput.model_validate(raw_holding(qty=0))


class TestServiceLayering:
    """The service layer must not depend on the HTTP layer."""

    def test_services_never_import_api(self):
        """
        GIVEN every module in the services package
        WHEN its imports are inspected
        THEN none of them reaches into portfolio_valuation.api
        """
        offenders = []
        for path in Path(services_pkg.__file__).parent.glob("*.py"):
            tree = ast.parse(path.read_text(encoding="utf-8"))
            for node in ast.walk(tree):
                if isinstance(node, ast.ImportFrom) and node.module:
                    names = [node.module]
                elif isinstance(node, ast.Import):
                    names = [alias.name for alias in node.names]
                else:
                    continue
                if any(name.startswith("portfolio_valuation.api") for name in names):
                    offenders.append(path.name)

        assert offenders == []

"""
API tests for portfolio endpoints.

Tests cover:
- Valuing a posted batch of holdings
- Seed fallback when the body is missing or unparseable
- Batch rejection with the offending index (400)
- Static seed portfolio without market data
"""

from decimal import Decimal

from fastapi.testclient import TestClient

from tests.conftest import DeterministicMarketProvider, raw_holding


# =============================================================================
# POST /portfolio TESTS
# =============================================================================


class TestValuePortfolioAPI:
    """Tests for POST /portfolio endpoint."""

    def test_single_holding_valued(self, client: TestClient):
        """
        GIVEN one holding bought at 100 x 10 and a live price of 120
        WHEN I POST /portfolio
        THEN the holding and totals carry the derived values
        """
        response = client.post("/portfolio", json=[raw_holding("X", purchase_price=100, qty=10)])

        assert response.status_code == 200
        data = response.json()
        holding = data["holdings"][0]
        assert Decimal(holding["investment"]) == Decimal("1000")
        assert Decimal(holding["current_price"]) == Decimal("120")
        assert Decimal(holding["present_value"]) == Decimal("1200")
        assert Decimal(holding["gain_loss"]) == Decimal("200")
        assert Decimal(holding["portfolio_percent"]) == Decimal("100.00")
        assert Decimal(holding["pe_ratio"]) == Decimal("24.5")
        assert holding["latest_earnings"] == "Q2 FY2025"
        assert holding["stale"] is False
        assert Decimal(data["totals"]["gain_loss_percent"]) == Decimal("20.00")
        assert data["last_updated"] is not None

    def test_sectors_grouped(self, client: TestClient):
        response = client.post("/portfolio", json=[
            raw_holding("TCS", sector="Technology"),
            raw_holding("ITC", sector="Consumer"),
            raw_holding("INFY", sector="Technology"),
        ])

        assert response.status_code == 200
        sectors = response.json()["sectors"]
        assert set(sectors) == {"Technology", "Consumer"}
        assert [h["symbol"] for h in sectors["Technology"]["holdings"]] == ["TCS", "INFY"]
        assert Decimal(sectors["Consumer"]["totals"]["investment"]) == Decimal("1000")

    def test_second_request_served_from_cache(
        self,
        client: TestClient,
        deterministic_provider: DeterministicMarketProvider,
    ):
        client.post("/portfolio", json=[raw_holding("X")])

        response = client.post("/portfolio", json=[raw_holding("X")])

        assert response.json()["holdings"][0]["stale"] is True
        assert deterministic_provider.quote_calls == ["X"]

    def test_invalid_holding_returns_400_with_index(
        self,
        client: TestClient,
        deterministic_provider: DeterministicMarketProvider,
    ):
        """
        GIVEN a batch whose third record has a negative quantity
        WHEN I POST /portfolio
        THEN response is 400 naming index 2 and nothing is fetched
        """
        response = client.post("/portfolio", json=[
            raw_holding("A"),
            raw_holding("B"),
            raw_holding("C", qty=-1),
        ])

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["index"] == 2
        assert "qty" in data["message"]
        assert deterministic_provider.quote_calls == []

    def test_non_array_body_returns_400(self, client: TestClient):
        response = client.post("/portfolio", json={"symbol": "X"})

        assert response.status_code == 400
        assert "index" not in response.json()

    def test_missing_body_values_seed(
        self,
        client: TestClient,
        deterministic_provider: DeterministicMarketProvider,
    ):
        response = client.post("/portfolio")

        assert response.status_code == 200
        holdings = response.json()["holdings"]
        assert len(holdings) > 0
        assert len(deterministic_provider.quote_calls) == len(holdings)

    def test_unparseable_body_values_seed(self, client: TestClient):
        response = client.post(
            "/portfolio",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert len(response.json()["holdings"]) > 0

    def test_empty_array_values_nothing(self, client: TestClient):
        response = client.post("/portfolio", json=[])

        assert response.status_code == 200
        data = response.json()
        assert data["holdings"] == []
        assert data["sectors"] == {}
        assert data["totals"]["present_value"] is None


# =============================================================================
# GET /portfolio TESTS
# =============================================================================


class TestStaticPortfolioAPI:
    """Tests for GET /portfolio endpoint."""

    def test_static_seed_has_no_live_fields(
        self,
        client: TestClient,
        deterministic_provider: DeterministicMarketProvider,
    ):
        response = client.get("/portfolio")

        assert response.status_code == 200
        holdings = response.json()["holdings"]
        assert len(holdings) > 0
        assert all(h["current_price"] is None for h in holdings)
        assert all(h["investment"] is not None for h in holdings)
        assert deterministic_provider.quote_calls == []

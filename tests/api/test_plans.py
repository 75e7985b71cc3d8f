"""Tests for the planning API endpoints."""

from decimal import Decimal
from typing import Any

from fastapi.testclient import TestClient

RMD_PORTFOLIO: dict[str, Any] = {
    "traditional": {"balance": "500000", "prior_year_end_balance": "500000"}
}
GROSS_GOAL: dict[str, Any] = {
    "target_type": "gross",
    "amount": "50000",
    "filing_status": "single",
    "primary_age": 73,
}


def _dec(value: Any) -> Decimal:
    return Decimal(str(value))


class TestStrategyEndpoint:
    """Tests for POST /api/plans/strategy."""

    def test_generates_strategy_with_breakdown(self, client: TestClient) -> None:
        response = client.post(
            "/api/plans/strategy",
            json={"portfolio": RMD_PORTFOLIO, "goal": GROSS_GOAL},
        )

        assert response.status_code == 200
        data = response.json()
        assert _dec(data["strategy"]["traditional_withdrawal"]) == Decimal("50000")
        assert _dec(data["strategy"]["rmd_amount"]) == Decimal("18868")
        assert data["breakdown"]["rmd_is_satisfied"] is True
        assert _dec(data["breakdown"]["total_tax"]) == Decimal("3820")
        assert data["validation"] == {"valid": True, "errors": []}
        assert data["explanation"][0].startswith("Includes $18,868")

    def test_unknown_tax_year_is_bad_request(self, client: TestClient) -> None:
        goal = {**GROSS_GOAL, "tax_year": 1999}
        response = client.post(
            "/api/plans/strategy", json={"portfolio": RMD_PORTFOLIO, "goal": goal}
        )

        assert response.status_code == 400
        assert "1999" in response.json()["detail"]

    def test_negative_balance_is_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/plans/strategy",
            json={"portfolio": {"roth": {"balance": "-5"}}, "goal": GROSS_GOAL},
        )
        assert response.status_code == 422

    def test_request_id_is_echoed(self, client: TestClient) -> None:
        response = client.post(
            "/api/plans/strategy",
            json={"portfolio": RMD_PORTFOLIO, "goal": GROSS_GOAL},
            headers={"X-Request-ID": "plan-123"},
        )
        assert response.headers["X-Request-ID"] == "plan-123"


class TestBreakdownEndpoint:
    """Tests for POST /api/plans/breakdown."""

    def test_reports_violations_without_failing(self, client: TestClient) -> None:
        response = client.post(
            "/api/plans/breakdown",
            json={
                "strategy": {
                    "traditional_withdrawal": "10000",
                    "roth_withdrawal": "5000",
                    "rmd_amount": "18868",
                },
                "portfolio": RMD_PORTFOLIO,
                "goal": GROSS_GOAL,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["validation"]["valid"] is False
        assert "Roth withdrawal exceeds available balance" in data["validation"]["errors"]
        assert data["breakdown"]["rmd_is_satisfied"] is False
        assert _dec(data["breakdown"]["roth_income"]) == Decimal("5000")


class TestProjectionEndpoint:
    """Tests for POST /api/plans/projection."""

    def test_projection_with_stats_and_summary(self, client: TestClient) -> None:
        goal = {**GROSS_GOAL, "planning_horizon": 80}
        response = client.post(
            "/api/plans/projection",
            json={
                "portfolio": RMD_PORTFOLIO,
                "goal": goal,
                "assumptions": {"growth_rate": "0.04"},
                "start_year": 2030,
            },
        )

        assert response.status_code == 200
        data = response.json()
        years = data["projection"]["years"]
        assert len(years) == 8
        assert years[0]["year"] == 2030
        assert _dec(years[0]["rmd_amount"]) == Decimal("18868")
        assert data["stats"]["years_in_retirement"] == 8
        assert [row["age"] for row in data["summary_years"]] == [73, 78, 80]

    def test_initial_strategy_override(self, client: TestClient) -> None:
        goal = {**GROSS_GOAL, "planning_horizon": 74}
        response = client.post(
            "/api/plans/projection",
            json={
                "portfolio": RMD_PORTFOLIO,
                "goal": goal,
                "initial_strategy": {
                    "traditional_withdrawal": "30000",
                    "rmd_amount": "18868",
                },
                "start_year": 2030,
            },
        )

        assert response.status_code == 200
        first = response.json()["projection"]["years"][0]
        assert _dec(first["withdrawals"]["traditional"]) == Decimal("30000")

    def test_percent_growth_rate_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/plans/projection",
            json={
                "portfolio": RMD_PORTFOLIO,
                "goal": GROSS_GOAL,
                "assumptions": {"growth_rate": "5"},
            },
        )
        assert response.status_code == 422


class TestGuardrailsEndpoint:
    """Tests for POST /api/plans/guardrails."""

    def test_guardrails_assessment(self, client: TestClient) -> None:
        response = client.post(
            "/api/plans/guardrails",
            json={
                "portfolio_value": "1000000",
                "current_withdrawal": "90000",
                "fixed_income": "20000",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["status"] == "above"
        assert data["assessment"]["is_sustainable"] is False
        assert _dec(data["result"]["current_rate"]) == Decimal("0.07")

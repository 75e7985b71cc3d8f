"""Pytest configuration and shared fixtures for tests."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from drawdown.main import app
from drawdown.planning.models import (
    FilingStatus,
    IncomeGoal,
    Portfolio,
    TargetType,
    TraditionalAccount,
)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests.

    Returns:
        Backend name string.
    """
    return "asyncio"


@pytest.fixture
def client() -> TestClient:
    """Create a test client for API testing.

    Returns:
        FastAPI TestClient instance.
    """
    return TestClient(app)


@pytest.fixture
def rmd_age_portfolio() -> Portfolio:
    """Single retiree at RMD age with only a traditional account."""
    return Portfolio(
        traditional=TraditionalAccount(
            balance=Decimal("500000"), prior_year_end_balance=Decimal("500000")
        )
    )


@pytest.fixture
def gross_goal_at_73() -> IncomeGoal:
    """Gross $50,000 goal for a single filer aged 73."""
    return IncomeGoal(
        target_type=TargetType.GROSS,
        amount=Decimal("50000"),
        filing_status=FilingStatus.SINGLE,
        primary_age=73,
        tax_year=2026,
    )

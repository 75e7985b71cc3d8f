"""Tests for planning input models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from drawdown.planning.models import (
    FilingStatus,
    IncomeGoal,
    Portfolio,
    ProjectionAssumptions,
    RothAccount,
    TaxableAccount,
    TraditionalAccount,
    WithdrawalStrategy,
    filing_status_key,
)


class TestAccounts:
    """Tests for account slot models."""

    def test_negative_balance_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RothAccount(balance=Decimal("-1"))

    def test_gains_ratio(self) -> None:
        account = TaxableAccount(balance=Decimal("100000"), cost_basis=Decimal("60000"))
        assert account.unrealized_gains == Decimal("40000")
        assert account.gains_ratio == Decimal("0.4")

    def test_gains_ratio_zero_balance(self) -> None:
        account = TaxableAccount(balance=Decimal("0"), cost_basis=Decimal("0"))
        assert account.gains_ratio == Decimal("0")

    def test_rmd_balance_defaults_to_balance(self) -> None:
        account = TraditionalAccount(balance=Decimal("250000"))
        assert account.rmd_balance == Decimal("250000")

    def test_missing_slots_are_zero(self) -> None:
        portfolio = Portfolio()
        assert portfolio.total_balance == Decimal("0")
        assert portfolio.social_security_benefit == Decimal("0")
        assert portfolio.pension_benefit == Decimal("0")


class TestGoalAndStrategy:
    """Tests for goal and strategy models."""

    def test_goal_accepts_status_code(self) -> None:
        goal = IncomeGoal(
            target_type="after_tax", amount="60000", filing_status="mfj", primary_age=67
        )
        assert goal.filing_status == FilingStatus.MARRIED_JOINT
        assert goal.planning_horizon == 95

    def test_state_rate_must_be_fraction(self) -> None:
        with pytest.raises(ValidationError):
            IncomeGoal(
                target_type="gross",
                amount="60000",
                filing_status="single",
                primary_age=67,
                state_tax_rate="5",
            )

    def test_negative_withdrawal_rejected(self) -> None:
        with pytest.raises(ValidationError):
            WithdrawalStrategy(traditional_withdrawal=Decimal("-100"))

    def test_total_withdrawal(self) -> None:
        strategy = WithdrawalStrategy(
            traditional_withdrawal=Decimal("1"),
            taxable_withdrawal=Decimal("2"),
            roth_withdrawal=Decimal("3"),
            social_security_income=Decimal("4"),
            pension_income=Decimal("5"),
        )
        assert strategy.total_withdrawal == Decimal("15")

    def test_filing_status_key(self) -> None:
        assert filing_status_key(FilingStatus.HEAD_OF_HOUSEHOLD) == "hoh"
        with pytest.raises(ValueError):
            filing_status_key("joint")


class TestProjectionAssumptions:
    """Tests for projection assumption validation."""

    def test_percentages_rejected(self) -> None:
        with pytest.raises(ValidationError, match="must be a fraction"):
            ProjectionAssumptions(growth_rate=Decimal("5"))

    def test_negative_growth_allowed(self) -> None:
        assumptions = ProjectionAssumptions(growth_rate=Decimal("-0.2"))
        assert assumptions.growth_rate == Decimal("-0.2")

"""Tests for the tax breakdown orchestrator and gross-up helpers."""

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from drawdown.planning.calculator import (
    calculate_gross_for_after_tax,
    calculate_tax_breakdown,
    estimate_tax_for_gross_income,
)
from drawdown.planning.models import (
    FilingStatus,
    IncomeGoal,
    PensionIncome,
    Portfolio,
    SocialSecurityIncome,
    StateTaxMethod,
    TargetType,
    TaxableAccount,
    TraditionalAccount,
    WithdrawalStrategy,
)


@pytest.fixture
def goal() -> IncomeGoal:
    return IncomeGoal(
        target_type=TargetType.GROSS,
        amount=Decimal("50000"),
        filing_status=FilingStatus.SINGLE,
        primary_age=65,
    )


@pytest.fixture
def traditional_portfolio() -> Portfolio:
    return Portfolio(traditional=TraditionalAccount(balance=Decimal("500000")))


class TestCalculateTaxBreakdown:
    """Tests for the full single-year breakdown."""

    def test_traditional_only(
        self, traditional_portfolio: Portfolio, goal: IncomeGoal
    ) -> None:
        strategy = WithdrawalStrategy(traditional_withdrawal=Decimal("50000"))
        breakdown = calculate_tax_breakdown(strategy, traditional_portfolio, goal)

        assert breakdown.gross_income == Decimal("50000")
        assert breakdown.deductions == Decimal("16100")
        assert breakdown.deduction_type == "standard"
        assert breakdown.taxable_ordinary_income == Decimal("33900")
        # 10% of $12,400 plus 12% of $21,500
        assert breakdown.ordinary_income_tax == Decimal("3820")
        assert breakdown.capital_gains_tax == Decimal("0")
        assert breakdown.total_tax == Decimal("3820")
        assert breakdown.after_tax_income == Decimal("46180")
        assert breakdown.effective_rate == Decimal("0.0764")
        assert breakdown.marginal_ordinary_rate == Decimal("0.12")
        assert breakdown.rmd_is_satisfied is True

    def test_bracket_fill_attributes_traditional_income(
        self, traditional_portfolio: Portfolio, goal: IncomeGoal
    ) -> None:
        strategy = WithdrawalStrategy(traditional_withdrawal=Decimal("50000"))
        breakdown = calculate_tax_breakdown(strategy, traditional_portfolio, goal)

        assert sum(f.income_in_bracket for f in breakdown.bracket_fill) == Decimal(
            "33900"
        )
        for fill in breakdown.bracket_fill:
            assert [s.account for s in fill.sources] == ["traditional"]

    def test_taxable_withdrawal_realizes_gains_at_zero_rate(self, goal: IncomeGoal) -> None:
        portfolio = Portfolio(
            taxable=TaxableAccount(balance=Decimal("100000"), cost_basis=Decimal("60000"))
        )
        strategy = WithdrawalStrategy(taxable_withdrawal=Decimal("20000"))
        breakdown = calculate_tax_breakdown(strategy, portfolio, goal)

        assert breakdown.long_term_capital_gains == Decimal("8000")
        assert breakdown.taxable_income == Decimal("8000")
        assert breakdown.capital_gains_tax == Decimal("0")
        assert breakdown.after_tax_income == Decimal("20000")
        assert breakdown.adjusted_gross_income == Decimal("8000")

    def test_loss_position_realizes_no_gain(self, goal: IncomeGoal) -> None:
        account = TaxableAccount(balance=Decimal("50000"), cost_basis=Decimal("80000"))
        assert account.unrealized_gains == Decimal("-30000")
        assert account.gains_ratio == Decimal("0")

        strategy = WithdrawalStrategy(taxable_withdrawal=Decimal("10000"))
        breakdown = calculate_tax_breakdown(strategy, Portfolio(taxable=account), goal)
        assert breakdown.long_term_capital_gains == Decimal("0")
        assert breakdown.total_tax == Decimal("0")

    def test_loss_position_logged_at_debug(self, goal: IncomeGoal) -> None:
        """Solver loops recompute breakdowns, so the clamp must stay quiet."""
        portfolio = Portfolio(
            taxable=TaxableAccount(balance=Decimal("50000"), cost_basis=Decimal("80000"))
        )
        strategy = WithdrawalStrategy(taxable_withdrawal=Decimal("10000"))

        with capture_logs() as logs:
            calculate_tax_breakdown(strategy, portfolio, goal)

        clamped = [e for e in logs if e["event"] == "negative_unrealized_gains_clamped"]
        assert len(clamped) == 1
        assert clamped[0]["log_level"] == "debug"

    def test_social_security_taxed_with_other_income(self, goal: IncomeGoal) -> None:
        portfolio = Portfolio(
            traditional=TraditionalAccount(balance=Decimal("500000")),
            social_security=SocialSecurityIncome(annual_benefit=Decimal("30000")),
        )
        strategy = WithdrawalStrategy(
            traditional_withdrawal=Decimal("20000"),
            social_security_income=Decimal("30000"),
        )
        breakdown = calculate_tax_breakdown(strategy, portfolio, goal)

        assert breakdown.social_security_gross == Decimal("30000")
        assert breakdown.social_security_taxable == Decimal("5350")
        assert breakdown.ordinary_income == Decimal("25350")
        assert breakdown.ordinary_income_tax == Decimal("925")
        accounts = {s.account for f in breakdown.bracket_fill for s in f.sources}
        assert accounts == {"traditional", "social_security"}

    def test_pension_is_ordinary_income(self, goal: IncomeGoal) -> None:
        portfolio = Portfolio(pension=PensionIncome(annual_benefit=Decimal("30000")))
        strategy = WithdrawalStrategy(pension_income=Decimal("30000"))
        breakdown = calculate_tax_breakdown(strategy, portfolio, goal)

        assert breakdown.pension_taxable == Decimal("30000")
        assert breakdown.taxable_ordinary_income == Decimal("13900")

    def test_roth_is_tax_free(self, goal: IncomeGoal) -> None:
        strategy = WithdrawalStrategy(roth_withdrawal=Decimal("80000"))
        breakdown = calculate_tax_breakdown(strategy, Portfolio(), goal)

        assert breakdown.roth_income == Decimal("80000")
        assert breakdown.total_tax == Decimal("0")
        assert breakdown.after_tax_income == Decimal("80000")

    def test_itemized_deduction(
        self, traditional_portfolio: Portfolio, goal: IncomeGoal
    ) -> None:
        itemizing = goal.model_copy(
            update={"use_itemized_deductions": True, "itemized_amount": Decimal("40000")}
        )
        strategy = WithdrawalStrategy(traditional_withdrawal=Decimal("50000"))
        breakdown = calculate_tax_breakdown(strategy, traditional_portfolio, itemizing)

        assert breakdown.deduction_type == "itemized"
        assert breakdown.taxable_ordinary_income == Decimal("10000")

    def test_state_tax_by_rate(
        self, traditional_portfolio: Portfolio, goal: IncomeGoal
    ) -> None:
        with_state = goal.model_copy(
            update={
                "state_tax_method": StateTaxMethod.RATE,
                "state_tax_rate": Decimal("0.05"),
            }
        )
        strategy = WithdrawalStrategy(traditional_withdrawal=Decimal("50000"))
        breakdown = calculate_tax_breakdown(strategy, traditional_portfolio, with_state)

        assert breakdown.state_tax == Decimal("1695")
        assert breakdown.federal_tax == Decimal("3820")
        assert breakdown.total_tax == Decimal("5515")

    def test_state_tax_fixed_amount(
        self, traditional_portfolio: Portfolio, goal: IncomeGoal
    ) -> None:
        with_state = goal.model_copy(
            update={
                "state_tax_method": StateTaxMethod.FIXED,
                "state_tax_fixed_amount": Decimal("1200"),
            }
        )
        strategy = WithdrawalStrategy(traditional_withdrawal=Decimal("50000"))
        breakdown = calculate_tax_breakdown(strategy, traditional_portfolio, with_state)
        assert breakdown.state_tax == Decimal("1200")

    def test_empty_strategy_has_zero_rates(self, goal: IncomeGoal) -> None:
        breakdown = calculate_tax_breakdown(WithdrawalStrategy(), Portfolio(), goal)

        assert breakdown.gross_income == Decimal("0")
        assert breakdown.effective_rate == Decimal("0")
        assert breakdown.effective_rate_on_agi == Decimal("0")
        assert breakdown.effective_rate_on_taxable == Decimal("0")
        assert breakdown.bracket_fill == []

    def test_rmd_not_satisfied(
        self, traditional_portfolio: Portfolio, goal: IncomeGoal
    ) -> None:
        strategy = WithdrawalStrategy(
            traditional_withdrawal=Decimal("10000"), rmd_amount=Decimal("18868")
        )
        breakdown = calculate_tax_breakdown(strategy, traditional_portfolio, goal)
        assert breakdown.rmd_is_satisfied is False

    def test_over_withdrawal_is_computed_not_rejected(self, goal: IncomeGoal) -> None:
        portfolio = Portfolio(traditional=TraditionalAccount(balance=Decimal("1000")))
        strategy = WithdrawalStrategy(traditional_withdrawal=Decimal("50000"))
        breakdown = calculate_tax_breakdown(strategy, portfolio, goal)
        assert breakdown.total_tax == Decimal("3820")

    def test_identical_inputs_give_identical_output(self, goal: IncomeGoal) -> None:
        portfolio = Portfolio(
            traditional=TraditionalAccount(balance=Decimal("300000")),
            taxable=TaxableAccount(balance=Decimal("80000"), cost_basis=Decimal("50000")),
            social_security=SocialSecurityIncome(annual_benefit=Decimal("24000")),
        )
        strategy = WithdrawalStrategy(
            traditional_withdrawal=Decimal("30000"),
            taxable_withdrawal=Decimal("15000"),
            social_security_income=Decimal("24000"),
        )

        first = calculate_tax_breakdown(strategy, portfolio, goal)
        second = calculate_tax_breakdown(strategy, portfolio, goal)
        assert first == second
        assert repr(first) == repr(second)


class TestGrossForAfterTax:
    """Tests for the rough gross-up helpers."""

    def test_estimate_tax_uses_standard_deduction(self) -> None:
        assert estimate_tax_for_gross_income(Decimal("50000"), "single") == Decimal(
            "3820"
        )

    def test_estimate_tax_below_deduction_is_zero(self) -> None:
        assert estimate_tax_for_gross_income(Decimal("10000"), "single") == Decimal("0")

    def test_gross_for_after_tax_converges(self) -> None:
        target = Decimal("46180")
        gross = calculate_gross_for_after_tax(target, "single")

        assert gross == gross.to_integral_value()
        net = gross - estimate_tax_for_gross_income(gross, "single")
        assert abs(net - target) < Decimal("100")

    def test_gross_for_after_tax_respects_iteration_cap(self) -> None:
        target = Decimal("46180")
        # No iterations: the target / 0.75 starting point comes back rounded.
        gross = calculate_gross_for_after_tax(target, "single", max_iterations=0)
        assert gross == Decimal("61573")

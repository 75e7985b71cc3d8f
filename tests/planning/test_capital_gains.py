"""Tests for long-term capital gains stacking and NIIT."""

from decimal import Decimal

import pytest

from drawdown.planning.capital_gains import (
    calculate_capital_gains_tax,
    calculate_niit,
    get_capital_gains_rate,
    get_zero_percent_room,
)


class TestCalculateCapitalGainsTax:
    """Tests for gains stacked on top of ordinary income."""

    def test_gains_straddling_zero_rate_ceiling(self) -> None:
        """$9,450 fits under the 0% ceiling, the rest is taxed at 15%."""
        result = calculate_capital_gains_tax(
            Decimal("20000"), Decimal("40000"), "single"
        )

        assert result.tax == Decimal("1582.50")
        assert result.effective_rate == Decimal("0.079125")
        assert [(p.rate, p.amount) for p in result.bracket_breakdown] == [
            (Decimal("0"), Decimal("9450")),
            (Decimal("0.15"), Decimal("10550")),
        ]

    def test_ordinary_income_above_ceiling_skips_zero_bracket(self) -> None:
        result = calculate_capital_gains_tax(
            Decimal("10000"), Decimal("60000"), "single"
        )
        assert result.tax == Decimal("1500.00")
        assert len(result.bracket_breakdown) == 1

    def test_gains_straddling_twenty_percent_bracket(self) -> None:
        result = calculate_capital_gains_tax(
            Decimal("10000"), Decimal("540000"), "single"
        )
        # $5,500 at 15% and $4,500 at 20%
        assert result.tax == Decimal("1725.00")

    def test_no_gains_no_tax(self) -> None:
        for gains in (Decimal("0"), Decimal("-1000")):
            result = calculate_capital_gains_tax(gains, Decimal("40000"), "single")
            assert result.tax == Decimal("0")
            assert result.effective_rate == Decimal("0")
            assert result.bracket_breakdown == []

    def test_joint_filers_have_wider_zero_bracket(self) -> None:
        result = calculate_capital_gains_tax(Decimal("20000"), Decimal("40000"), "mfj")
        assert result.tax == Decimal("0")

    @pytest.mark.parametrize("status", ["single", "mfj", "hoh"])
    def test_tax_non_decreasing_in_ordinary_income(self, status: str) -> None:
        gains = Decimal("20000")
        taxes = [
            calculate_capital_gains_tax(gains, Decimal(income), status).tax
            for income in ("0", "30000", "49450", "100000", "540000", "700000")
        ]
        assert taxes == sorted(taxes)

    def test_tax_at_least_marginal_rate_at_ordinary_income(self) -> None:
        """Stacking never taxes gains below the rate where they start."""
        gains = Decimal("20000")
        for income in ("0", "40000", "540000"):
            ordinary = Decimal(income)
            result = calculate_capital_gains_tax(gains, ordinary, "single")
            start_rate = get_capital_gains_rate(ordinary, "single")
            assert result.tax >= gains * start_rate


class TestCapitalGainsHelpers:
    """Tests for rate lookup, 0% room and NIIT."""

    def test_marginal_rate_by_income(self) -> None:
        assert get_capital_gains_rate(Decimal("40000"), "single") == Decimal("0")
        assert get_capital_gains_rate(Decimal("49450"), "single") == Decimal("0")
        assert get_capital_gains_rate(Decimal("49451"), "single") == Decimal("0.15")
        assert get_capital_gains_rate(Decimal("600000"), "single") == Decimal("0.20")

    def test_zero_percent_room(self) -> None:
        assert get_zero_percent_room(Decimal("40000"), "single") == Decimal("9450")
        assert get_zero_percent_room(Decimal("60000"), "single") == Decimal("0")

    def test_niit_applies_to_lesser_amount(self) -> None:
        # MAGI exceeds the threshold by $20,000, less than investment income.
        assert calculate_niit(
            Decimal("50000"), Decimal("220000"), "single"
        ) == Decimal("760.000")
        # Investment income is the smaller amount.
        assert calculate_niit(
            Decimal("10000"), Decimal("300000"), "single"
        ) == Decimal("380.000")

    def test_niit_zero_below_threshold(self) -> None:
        assert calculate_niit(Decimal("50000"), Decimal("180000"), "single") == Decimal("0")

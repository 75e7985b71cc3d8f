"""Tax-efficient withdrawal strategy generation.

generate_strategy is a greedy heuristic, not an optimal solver. It fills
income needs in a fixed priority order:

0. Forced income: Social Security, pension and the RMD
1. Traditional withdrawals up to the top of the 12% bracket
2. Taxable-account sales while realized gains stay in the 0% bracket
3. Roth withdrawals (tax-free)
4. More traditional withdrawals at higher brackets
5. More taxable-account sales

The multipliers used below (1.5 / 1.85 for the Social Security interaction,
1.25 / 1.15 / 0.8 / 0.9 for after-tax refinement) are empirical
approximations of the tax function, not exact inverses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from drawdown.core.logging import get_logger
from drawdown.planning.brackets import calculate_ordinary_income_tax
from drawdown.planning.calculator import TaxBreakdown, calculate_tax_breakdown
from drawdown.planning.deductions import calculate_deduction
from drawdown.planning.formatting import format_currency, format_percentage, round_dollars
from drawdown.planning.models import (
    FilingStatus,
    IncomeGoal,
    Portfolio,
    TargetType,
    WithdrawalStrategy,
    filing_status_key,
)
from drawdown.planning.rmd import calculate_rmd
from drawdown.planning.social_security import calculate_social_security_taxable
from drawdown.tax.year_config import get_tax_year_config

logger = get_logger(__name__)

ZERO = Decimal("0")

LOW_BRACKET_MAX_RATE = Decimal("0.12")
SS_TAXABLE_ROOM_DIVISOR = Decimal("1.85")
ROOM_DIVISOR = Decimal("1.5")
DEFAULT_GAINS_RATIO = Decimal("0.4")

ESTIMATE_MAX_ITERATIONS = 10
REFINE_MAX_ITERATIONS = 15
CONVERGENCE_TOLERANCE = Decimal("500")

TRADITIONAL_SHORTFALL_FACTOR = Decimal("1.25")
TAXABLE_SHORTFALL_FACTOR = Decimal("1.15")
TRADITIONAL_SURPLUS_FACTOR = Decimal("0.8")
TAXABLE_SURPLUS_FACTOR = Decimal("0.9")

LOW_EFFECTIVE_RATE = Decimal("0.15")
FAVORABLE_CAPITAL_GAINS_RATE = Decimal("0.15")


@dataclass
class StrategyValidation:
    """Outcome of checking a strategy against the portfolio.

    Attributes:
        valid: True when no violations were found.
        errors: Human-readable violations, empty when valid.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)


def _estimate_gross_for_after_tax(
    after_tax_target: Decimal,
    filing_status: FilingStatus,
    deduction: Decimal,
    tax_year: int,
) -> Decimal:
    """Coarse gross estimate treating everything as ordinary income."""
    gross = after_tax_target

    for _ in range(ESTIMATE_MAX_ITERATIONS):
        taxable_income = max(ZERO, gross - deduction)
        estimated_tax = calculate_ordinary_income_tax(
            taxable_income, filing_status, tax_year=tax_year
        ).tax
        difference = after_tax_target - (gross - estimated_tax)
        if abs(difference) < CONVERGENCE_TOLERANCE:
            return gross
        gross += difference

    logger.debug(
        "gross_estimate_iterations_exhausted",
        after_tax_target=after_tax_target,
        gross_estimate=gross,
    )
    return gross


def generate_strategy(portfolio: Portfolio, goal: IncomeGoal) -> WithdrawalStrategy:
    """Generate a tax-efficient withdrawal strategy for an income goal.

    Args:
        portfolio: Available accounts and forced income.
        goal: Target amount, filing status and age.

    Returns:
        System-generated WithdrawalStrategy. The traditional withdrawal is
        never below the RMD, even for a zero goal.

    Raises:
        ValueError: If the goal's tax year is not configured.
    """
    filing_status = goal.filing_status
    tax_year = goal.tax_year

    traditional_available = portfolio.traditional_balance
    taxable_available = portfolio.taxable_balance
    roth_available = portfolio.roth_balance
    ss_annual = portfolio.social_security_benefit
    pension_annual = portfolio.pension_benefit

    # Phase 0: forced income
    prior_year_balance = (
        portfolio.traditional.rmd_balance if portfolio.traditional else ZERO
    )
    rmd_required = calculate_rmd(goal.primary_age, prior_year_balance).amount

    deduction = calculate_deduction(
        filing_status,
        goal.use_itemized_deductions,
        goal.itemized_amount,
        tax_year=tax_year,
    ).amount

    traditional = rmd_required
    taxable = ZERO
    roth = ZERO

    def ss_taxable_at(traditional_amount: Decimal) -> Decimal:
        other_income = traditional_amount + pension_annual
        return calculate_social_security_taxable(
            ss_annual, other_income, filing_status, tax_year=tax_year
        ).taxable_amount

    if goal.target_type == TargetType.GROSS:
        target_gross = goal.amount
    else:
        target_gross = _estimate_gross_for_after_tax(
            goal.amount, filing_status, deduction, tax_year
        )

    remaining = target_gross - ss_annual - pension_annual - rmd_required

    # Phase 1: fill the 10% and 12% brackets with traditional withdrawals
    config = get_tax_year_config(tax_year)
    key = filing_status_key(filing_status)
    low_brackets = [
        bracket
        for bracket in config.ordinary_brackets[key]
        if bracket.rate <= LOW_BRACKET_MAX_RATE and bracket.max is not None
    ]

    for bracket in low_brackets:
        if remaining <= ZERO or traditional >= traditional_available:
            break

        current_ss_taxable = ss_taxable_at(traditional)
        current_taxable_ordinary = (
            traditional + pension_annual + current_ss_taxable - deduction
        )
        bracket_room = max(ZERO, bracket.max - max(ZERO, current_taxable_ordinary))
        if bracket_room <= ZERO:
            continue

        # Each added dollar can pull up to $0.85 of benefits into taxable income.
        divisor = SS_TAXABLE_ROOM_DIVISOR if current_ss_taxable > ZERO else ROOM_DIVISOR
        additional = min(
            bracket_room / divisor, remaining, traditional_available - traditional
        )
        traditional += additional
        remaining -= additional
        logger.debug(
            "strategy_bracket_filled",
            rate=bracket.rate,
            bracket_room=bracket_room,
            traditional_added=additional,
        )

    # Phase 2: harvest gains at the 0% rate
    if remaining > ZERO and taxable_available > ZERO:
        zero_rate_ceiling = config.capital_gains_brackets[key][0].max
        current_taxable_income = (
            traditional + pension_annual + ss_taxable_at(traditional) - deduction
        )
        if zero_rate_ceiling is not None and current_taxable_income < zero_rate_ceiling:
            zero_rate_room = zero_rate_ceiling - max(ZERO, current_taxable_income)
            gains_ratio = (
                portfolio.taxable.gains_ratio if portfolio.taxable else DEFAULT_GAINS_RATIO
            )
            if gains_ratio > ZERO:
                max_withdrawal_at_zero = zero_rate_room / gains_ratio
            else:
                max_withdrawal_at_zero = taxable_available

            taxable = min(remaining, taxable_available, max_withdrawal_at_zero)
            remaining -= taxable
            logger.debug(
                "strategy_zero_rate_gains_harvested",
                zero_rate_room=zero_rate_room,
                gains_ratio=gains_ratio,
                taxable_withdrawal=taxable,
            )

    # Phase 3: Roth
    if remaining > ZERO and roth_available > ZERO:
        roth = min(remaining, roth_available)
        remaining -= roth

    # Phase 4: traditional at higher brackets
    if remaining > ZERO and traditional < traditional_available:
        additional = min(remaining, traditional_available - traditional)
        traditional += additional
        remaining -= additional

    # Phase 5: more taxable
    if remaining > ZERO and taxable < taxable_available:
        additional = min(remaining, taxable_available - taxable)
        taxable += additional
        remaining -= additional

    strategy = WithdrawalStrategy(
        traditional_withdrawal=max(round_dollars(traditional), rmd_required),
        taxable_withdrawal=round_dollars(taxable),
        roth_withdrawal=round_dollars(roth),
        social_security_income=round_dollars(ss_annual),
        pension_income=round_dollars(pension_annual),
        rmd_amount=rmd_required,
        is_system_generated=True,
    )

    if goal.target_type == TargetType.AFTER_TAX:
        strategy = _refine_for_after_tax_target(strategy, portfolio, goal)

    logger.info(
        "withdrawal_strategy_generated",
        target_type=goal.target_type.value,
        target_amount=goal.amount,
        traditional=strategy.traditional_withdrawal,
        taxable=strategy.taxable_withdrawal,
        roth=strategy.roth_withdrawal,
        rmd=strategy.rmd_amount,
        unmet_need=max(ZERO, remaining),
    )
    return strategy


def _refine_for_after_tax_target(
    initial_strategy: WithdrawalStrategy,
    portfolio: Portfolio,
    goal: IncomeGoal,
) -> WithdrawalStrategy:
    """Nudge withdrawals until the full breakdown lands near the after-tax goal."""
    strategy = initial_strategy
    target = goal.amount
    breakdown = calculate_tax_breakdown(strategy, portfolio, goal)

    for _ in range(REFINE_MAX_ITERATIONS):
        difference = target - breakdown.after_tax_income
        if abs(difference) < CONVERGENCE_TOLERANCE:
            return strategy

        traditional = strategy.traditional_withdrawal
        taxable = strategy.taxable_withdrawal
        roth = strategy.roth_withdrawal

        if difference > ZERO:
            # Shortfall: Roth carries no tax drag, so it goes first.
            if portfolio.roth_balance - roth > ZERO:
                roth = min(roth + difference, portfolio.roth_balance)
            elif portfolio.traditional_balance - traditional > ZERO:
                traditional = min(
                    traditional + difference * TRADITIONAL_SHORTFALL_FACTOR,
                    portfolio.traditional_balance,
                )
            elif portfolio.taxable_balance - taxable > ZERO:
                taxable = min(
                    taxable + difference * TAXABLE_SHORTFALL_FACTOR,
                    portfolio.taxable_balance,
                )
        else:
            overshoot = -difference
            if traditional > strategy.rmd_amount:
                traditional -= min(
                    overshoot * TRADITIONAL_SURPLUS_FACTOR,
                    traditional - strategy.rmd_amount,
                )
            elif taxable > ZERO:
                taxable -= min(overshoot * TAXABLE_SURPLUS_FACTOR, taxable)
            elif roth > ZERO:
                roth -= min(overshoot, roth)

        strategy = strategy.model_copy(
            update={
                "traditional_withdrawal": max(
                    round_dollars(traditional), strategy.rmd_amount
                ),
                "taxable_withdrawal": round_dollars(taxable),
                "roth_withdrawal": round_dollars(roth),
            }
        )
        breakdown = calculate_tax_breakdown(strategy, portfolio, goal)

    logger.debug(
        "after_tax_refinement_iterations_exhausted",
        target=target,
        after_tax_income=breakdown.after_tax_income,
    )
    return strategy


def validate_strategy(
    strategy: WithdrawalStrategy, portfolio: Portfolio
) -> StrategyValidation:
    """Check a strategy against account balances, benefits and the RMD."""
    errors: list[str] = []

    if strategy.traditional_withdrawal > portfolio.traditional_balance:
        errors.append("Traditional withdrawal exceeds available balance")
    if strategy.taxable_withdrawal > portfolio.taxable_balance:
        errors.append("Taxable withdrawal exceeds available balance")
    if strategy.roth_withdrawal > portfolio.roth_balance:
        errors.append("Roth withdrawal exceeds available balance")
    if strategy.social_security_income > portfolio.social_security_benefit:
        errors.append("Social Security income exceeds annual benefit")
    if strategy.pension_income > portfolio.pension_benefit:
        errors.append("Pension income exceeds annual benefit")
    if (
        strategy.rmd_amount > ZERO
        and strategy.traditional_withdrawal < strategy.rmd_amount
    ):
        errors.append(
            "Traditional withdrawal must be at least "
            f"{format_currency(strategy.rmd_amount)} to satisfy your Required "
            "Minimum Distribution"
        )

    return StrategyValidation(valid=not errors, errors=errors)


def explain_strategy(
    strategy: WithdrawalStrategy, breakdown: TaxBreakdown
) -> list[str]:
    """Plain-language bullets describing why the strategy looks the way it does."""
    explanations: list[str] = []

    if strategy.rmd_amount > ZERO:
        explanations.append(
            f"Includes {format_currency(strategy.rmd_amount)} Required Minimum "
            "Distribution from Traditional accounts."
        )

    if strategy.traditional_withdrawal > strategy.rmd_amount:
        explanations.append(
            "Traditional withdrawal fills lower tax brackets (up to "
            f"{format_percentage(breakdown.marginal_ordinary_rate, 0)} marginal rate)."
        )

    if (
        strategy.taxable_withdrawal > ZERO
        and breakdown.capital_gains_rate <= FAVORABLE_CAPITAL_GAINS_RATE
    ):
        explanations.append(
            "Taxable account withdrawal benefits from "
            f"{format_percentage(breakdown.capital_gains_rate, 0)} capital gains rate."
        )

    if strategy.roth_withdrawal > ZERO:
        explanations.append(
            "Roth withdrawal provides tax-free income, preserving tax-deferred "
            "growth in other accounts."
        )

    if breakdown.effective_rate < LOW_EFFECTIVE_RATE:
        explanations.append(
            f"Overall effective tax rate of {format_percentage(breakdown.effective_rate)} "
            "achieved through strategic withdrawal sequencing."
        )

    return explanations

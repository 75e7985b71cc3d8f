"""Multi-year retirement projection.

Projects balances, withdrawals, taxes and after-tax income from the primary
owner's current age through the planning horizon. Each year re-runs the
strategy generator and tax breakdown against that year's balances and an
inflation-adjusted goal; years are strictly sequential because each starts
from the prior year's ending balances.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from drawdown.core.config import settings
from drawdown.core.logging import get_logger
from drawdown.planning.calculator import TaxBreakdown, calculate_tax_breakdown
from drawdown.planning.formatting import round_dollars
from drawdown.planning.models import (
    IncomeGoal,
    PensionIncome,
    Portfolio,
    ProjectionAssumptions,
    RothAccount,
    SocialSecurityIncome,
    TaxableAccount,
    TraditionalAccount,
    WithdrawalStrategy,
)
from drawdown.planning.strategy import generate_strategy

logger = get_logger(__name__)

ZERO = Decimal("0")
MILESTONE_AGES = frozenset({73, 80, 85, 90, 95, 100})
SUMMARY_INTERVAL = 5


@dataclass
class AccountBalances:
    """Start-of-year balances, rounded to whole dollars."""

    traditional: Decimal
    taxable: Decimal
    roth: Decimal
    total: Decimal


@dataclass
class YearWithdrawals:
    """Amounts drawn from each source during the year."""

    traditional: Decimal
    taxable: Decimal
    roth: Decimal
    social_security: Decimal
    pension: Decimal
    total: Decimal


@dataclass
class YearTaxes:
    """Taxes owed on the year's withdrawals."""

    federal: Decimal
    state: Decimal
    total: Decimal


@dataclass
class ProjectionYear:
    """One projected year."""

    year: int
    age: int
    balances: AccountBalances
    rmd_amount: Decimal
    withdrawals: YearWithdrawals
    taxes: YearTaxes
    after_tax_income: Decimal
    effective_rate: Decimal


@dataclass
class RetirementProjection:
    """Year-by-year projection with lifetime totals.

    Attributes:
        start_age: Age of the first projected year.
        end_age: Last projected age (the planning horizon).
        assumptions: Growth, inflation and COLA used.
        years: One entry per age, in order.
        total_taxes_paid: Sum of every year's total tax.
        total_withdrawals: Sum of every year's gross withdrawals.
        final_portfolio_value: Balances left after the last year's growth.
        is_sustainable: True when balances never reached zero.
        depletion_age: First age that started with zero balances, if any.
    """

    start_age: int
    end_age: int
    assumptions: ProjectionAssumptions
    years: list[ProjectionYear]
    total_taxes_paid: Decimal
    total_withdrawals: Decimal
    final_portfolio_value: Decimal
    is_sustainable: bool
    depletion_age: int | None


@dataclass
class ProjectionStats:
    """Aggregate views over a completed projection."""

    average_effective_rate: Decimal
    peak_tax_year: ProjectionYear | None
    years_in_retirement: int
    total_after_tax_income: Decimal


def default_assumptions() -> ProjectionAssumptions:
    """Assumptions taken from application settings."""
    return ProjectionAssumptions(
        growth_rate=settings.default_growth_rate,
        inflation_rate=settings.default_inflation_rate,
        social_security_cola=settings.default_social_security_cola,
    )


def _portfolio_snapshot(
    traditional: Decimal,
    prior_year_traditional: Decimal,
    taxable: Decimal,
    cost_basis: Decimal,
    roth: Decimal,
    social_security: Decimal,
    pension: Decimal,
    pension_cola: Decimal,
) -> Portfolio:
    """Point-in-time portfolio; empty slots are absent rather than zero."""
    return Portfolio(
        traditional=(
            TraditionalAccount(
                balance=traditional, prior_year_end_balance=prior_year_traditional
            )
            if traditional > ZERO
            else None
        ),
        taxable=(
            TaxableAccount(balance=taxable, cost_basis=cost_basis)
            if taxable > ZERO
            else None
        ),
        roth=RothAccount(balance=roth) if roth > ZERO else None,
        social_security=(
            SocialSecurityIncome(annual_benefit=social_security)
            if social_security > ZERO
            else None
        ),
        pension=(
            PensionIncome(annual_benefit=pension, cola=pension_cola)
            if pension > ZERO
            else None
        ),
    )


def generate_retirement_projection(
    portfolio: Portfolio,
    goal: IncomeGoal,
    assumptions: ProjectionAssumptions | None = None,
    initial_strategy: WithdrawalStrategy | None = None,
    initial_breakdown: TaxBreakdown | None = None,
    start_year: int | None = None,
) -> RetirementProjection:
    """Project the plan from the primary owner's age to the planning horizon.

    When initial_strategy is given, the first year uses it verbatim (for
    example a strategy the user adjusted by hand); its breakdown is computed
    if not supplied. Every later year regenerates a strategy against the
    inflation-adjusted goal.

    Args:
        portfolio: Starting accounts and income.
        goal: Income goal in today's dollars.
        assumptions: Growth, inflation and COLA (settings defaults when None).
        initial_strategy: Optional first-year override.
        initial_breakdown: Optional precomputed breakdown for the override.
        start_year: Calendar year of the first row (defaults to this year).

    Returns:
        RetirementProjection with every year and lifetime totals.
    """
    assumptions = assumptions or default_assumptions()
    start_age = goal.primary_age
    end_age = goal.planning_horizon
    first_year = start_year if start_year is not None else date.today().year
    growth = 1 + assumptions.growth_rate

    traditional_balance = portfolio.traditional_balance
    prior_year_traditional = (
        portfolio.traditional.rmd_balance if portfolio.traditional else ZERO
    )
    taxable_balance = portfolio.taxable_balance
    roth_balance = portfolio.roth_balance
    cost_basis = portfolio.taxable.cost_basis if portfolio.taxable else ZERO
    social_security_benefit = portfolio.social_security_benefit
    pension_benefit = portfolio.pension_benefit
    pension_cola = portfolio.pension.cola if portfolio.pension else ZERO

    total_taxes_paid = ZERO
    total_withdrawals = ZERO
    depletion_age: int | None = None
    years: list[ProjectionYear] = []

    for age in range(start_age, end_age + 1):
        year_offset = age - start_age
        total_balance = traditional_balance + taxable_balance + roth_balance

        if total_balance <= ZERO and depletion_age is None:
            depletion_age = age
            logger.warning(
                "portfolio_depleted",
                depletion_age=age,
                planning_horizon=end_age,
            )

        year_portfolio = _portfolio_snapshot(
            traditional_balance,
            prior_year_traditional,
            taxable_balance,
            cost_basis,
            roth_balance,
            social_security_benefit,
            pension_benefit,
            pension_cola,
        )

        inflation = (1 + assumptions.inflation_rate) ** year_offset
        year_goal = goal.model_copy(
            update={
                "amount": round_dollars(goal.amount * inflation),
                "primary_age": age,
                "spouse_age": (
                    goal.spouse_age + year_offset if goal.spouse_age is not None else None
                ),
            }
        )

        if year_offset == 0 and initial_strategy is not None:
            strategy = initial_strategy
            breakdown = initial_breakdown or calculate_tax_breakdown(
                strategy, year_portfolio, year_goal
            )
        elif total_balance > ZERO or social_security_benefit > ZERO or pension_benefit > ZERO:
            strategy = generate_strategy(year_portfolio, year_goal)
            breakdown = calculate_tax_breakdown(strategy, year_portfolio, year_goal)
        else:
            strategy = WithdrawalStrategy(
                social_security_income=social_security_benefit,
                pension_income=pension_benefit,
                is_system_generated=True,
            )
            breakdown = calculate_tax_breakdown(strategy, year_portfolio, year_goal)

        withdrawals_total = strategy.total_withdrawal
        years.append(
            ProjectionYear(
                year=first_year + year_offset,
                age=age,
                balances=AccountBalances(
                    traditional=round_dollars(traditional_balance),
                    taxable=round_dollars(taxable_balance),
                    roth=round_dollars(roth_balance),
                    total=round_dollars(total_balance),
                ),
                rmd_amount=strategy.rmd_amount,
                withdrawals=YearWithdrawals(
                    traditional=strategy.traditional_withdrawal,
                    taxable=strategy.taxable_withdrawal,
                    roth=strategy.roth_withdrawal,
                    social_security=strategy.social_security_income,
                    pension=strategy.pension_income,
                    total=withdrawals_total,
                ),
                taxes=YearTaxes(
                    federal=breakdown.federal_tax,
                    state=breakdown.state_tax,
                    total=breakdown.total_tax,
                ),
                after_tax_income=breakdown.after_tax_income,
                effective_rate=breakdown.effective_rate,
            )
        )
        total_taxes_paid += breakdown.total_tax
        total_withdrawals += withdrawals_total

        if taxable_balance > ZERO and strategy.taxable_withdrawal > ZERO:
            withdrawal_ratio = min(
                Decimal("1"), strategy.taxable_withdrawal / taxable_balance
            )
            cost_basis = max(ZERO, cost_basis * (1 - withdrawal_ratio))

        traditional_balance = max(
            ZERO, traditional_balance - strategy.traditional_withdrawal
        )
        taxable_balance = max(ZERO, taxable_balance - strategy.taxable_withdrawal)
        roth_balance = max(ZERO, roth_balance - strategy.roth_withdrawal)

        traditional_balance *= growth
        taxable_balance *= growth
        roth_balance *= growth
        if taxable_balance > ZERO:
            cost_basis += (taxable_balance - cost_basis) * assumptions.growth_rate

        # Next year's RMD is based on this year's ending balance.
        prior_year_traditional = traditional_balance

        social_security_benefit *= 1 + assumptions.social_security_cola
        pension_benefit *= 1 + pension_cola

    final_value = traditional_balance + taxable_balance + roth_balance
    projection = RetirementProjection(
        start_age=start_age,
        end_age=end_age,
        assumptions=assumptions,
        years=years,
        total_taxes_paid=round_dollars(total_taxes_paid),
        total_withdrawals=round_dollars(total_withdrawals),
        final_portfolio_value=round_dollars(final_value),
        is_sustainable=depletion_age is None,
        depletion_age=depletion_age,
    )

    logger.info(
        "retirement_projection_complete",
        start_age=start_age,
        end_age=end_age,
        years=len(years),
        total_taxes_paid=projection.total_taxes_paid,
        final_portfolio_value=projection.final_portfolio_value,
        is_sustainable=projection.is_sustainable,
    )
    return projection


def get_summary_years(projection: RetirementProjection) -> list[ProjectionYear]:
    """Select first, last, every fifth, milestone and depletion years."""
    last_index = len(projection.years) - 1
    return [
        year
        for index, year in enumerate(projection.years)
        if index in (0, last_index)
        or (year.age - projection.start_age) % SUMMARY_INTERVAL == 0
        or year.age in MILESTONE_AGES
        or year.age == projection.depletion_age
    ]


def get_projection_stats(projection: RetirementProjection) -> ProjectionStats:
    """Income-weighted effective rate, peak tax year and total after-tax income."""
    if not projection.years:
        return ProjectionStats(
            average_effective_rate=ZERO,
            peak_tax_year=None,
            years_in_retirement=0,
            total_after_tax_income=ZERO,
        )

    total_income = sum((year.withdrawals.total for year in projection.years), ZERO)
    total_tax = sum((year.taxes.total for year in projection.years), ZERO)
    total_after_tax = sum((year.after_tax_income for year in projection.years), ZERO)

    # max() keeps the earliest year on ties.
    peak_tax_year = max(projection.years, key=lambda year: year.taxes.total)

    return ProjectionStats(
        average_effective_rate=total_tax / total_income if total_income > ZERO else ZERO,
        peak_tax_year=peak_tax_year,
        years_in_retirement=len(projection.years),
        total_after_tax_income=round_dollars(total_after_tax),
    )

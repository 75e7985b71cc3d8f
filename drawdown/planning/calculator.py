"""Tax breakdown for a withdrawal strategy.

calculate_tax_breakdown combines the leaf calculators in a fixed order:

1. Realized capital gains from the taxable-account withdrawal
2. Taxable Social Security (depends on all other income)
3. Gross income, AGI and the deduction
4. Ordinary income tax with a per-source bracket trace
5. Capital gains tax stacked on top of ordinary income
6. State tax, totals and effective rates

The function is pure: the same strategy, portfolio and goal always produce
an equal TaxBreakdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from drawdown.core.logging import get_logger
from drawdown.planning.brackets import (
    BracketFill,
    IncomeSource,
    TaxCharacter,
    calculate_ordinary_income_tax,
)
from drawdown.planning.capital_gains import (
    calculate_capital_gains_tax,
    get_capital_gains_rate,
)
from drawdown.planning.deductions import calculate_agi, calculate_deduction
from drawdown.planning.formatting import round_dollars
from drawdown.planning.models import (
    FilingStatus,
    IncomeGoal,
    Portfolio,
    StateTaxMethod,
    WithdrawalStrategy,
)
from drawdown.planning.social_security import calculate_social_security_taxable
from drawdown.tax.year_config import DEFAULT_TAX_YEAR

logger = get_logger(__name__)

ZERO = Decimal("0")
GROSS_SOLVER_MAX_ITERATIONS = 20
GROSS_SOLVER_TOLERANCE = Decimal("100")
GROSS_SOLVER_INITIAL_RETENTION = Decimal("0.75")


@dataclass
class TaxBreakdown:
    """Complete, traceable tax result for one year's withdrawal strategy.

    Rates are fractions. taxable_income covers ordinary income after the
    deduction plus realized capital gains.
    """

    # Income by source
    ordinary_income: Decimal
    qualified_dividends: Decimal
    long_term_capital_gains: Decimal
    social_security_gross: Decimal
    social_security_taxable: Decimal
    pension_gross: Decimal
    pension_taxable: Decimal
    roth_income: Decimal

    # Income totals
    gross_income: Decimal
    adjusted_gross_income: Decimal
    deductions: Decimal
    deduction_type: str
    taxable_ordinary_income: Decimal
    taxable_income: Decimal

    # Tax by type
    ordinary_income_tax: Decimal
    capital_gains_tax: Decimal
    state_tax: Decimal
    federal_tax: Decimal
    total_tax: Decimal

    # Bracket fill (for visualization)
    bracket_fill: list[BracketFill]

    # Results
    after_tax_income: Decimal
    effective_rate: Decimal
    effective_rate_on_agi: Decimal
    effective_rate_on_taxable: Decimal
    marginal_ordinary_rate: Decimal
    capital_gains_rate: Decimal
    marginal_capital_gains_rate: Decimal

    # RMD tracking
    rmd_amount: Decimal
    rmd_is_satisfied: bool


def _safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator <= ZERO:
        return ZERO
    return numerator / denominator


def _ordinary_sources(
    traditional: Decimal,
    pension: Decimal,
    social_security_taxable: Decimal,
    social_security_percent: Decimal,
) -> list[IncomeSource]:
    sources: list[IncomeSource] = []
    if traditional > ZERO:
        sources.append(
            IncomeSource(
                account="traditional",
                amount=traditional,
                tax_character=TaxCharacter.ORDINARY,
                description="Traditional 401(k)/IRA withdrawal",
            )
        )
    if pension > ZERO:
        sources.append(
            IncomeSource(
                account="pension",
                amount=pension,
                tax_character=TaxCharacter.ORDINARY,
                description="Pension income",
            )
        )
    if social_security_taxable > ZERO:
        sources.append(
            IncomeSource(
                account="social_security",
                amount=social_security_taxable,
                tax_character=TaxCharacter.PARTIALLY_TAXABLE,
                description=f"Social Security ({social_security_percent:.0f}% taxable)",
            )
        )
    return sources


def _state_tax(goal: IncomeGoal, state_taxable_income: Decimal) -> Decimal:
    if goal.state_tax_method == StateTaxMethod.RATE and goal.state_tax_rate:
        return state_taxable_income * goal.state_tax_rate
    if goal.state_tax_method == StateTaxMethod.FIXED and goal.state_tax_fixed_amount:
        return goal.state_tax_fixed_amount
    return ZERO


def calculate_tax_breakdown(
    strategy: WithdrawalStrategy,
    portfolio: Portfolio,
    goal: IncomeGoal,
) -> TaxBreakdown:
    """Calculate the complete tax breakdown for a withdrawal strategy.

    Over-withdrawals are not rejected here; the arithmetic is carried out on
    whatever amounts the strategy names. Use validate_strategy to check them.

    Args:
        strategy: Withdrawal amounts for the year.
        portfolio: Accounts the withdrawals are drawn from.
        goal: Filing status, deduction and state tax settings.

    Returns:
        TaxBreakdown with income by source, taxes, rates and bracket fill.
    """
    filing_status = goal.filing_status
    tax_year = goal.tax_year
    traditional = strategy.traditional_withdrawal
    taxable = strategy.taxable_withdrawal
    roth = strategy.roth_withdrawal
    social_security = strategy.social_security_income
    pension = strategy.pension_income

    # Only the gains share of a taxable-account sale is income; the rest is basis.
    capital_gains = ZERO
    if portfolio.taxable is not None and taxable > ZERO:
        if portfolio.taxable.unrealized_gains < ZERO:
            logger.debug(
                "negative_unrealized_gains_clamped",
                balance=portfolio.taxable.balance,
                cost_basis=portfolio.taxable.cost_basis,
            )
        capital_gains = taxable * portfolio.taxable.gains_ratio

    # Roth is excluded from provisional income.
    ss_result = calculate_social_security_taxable(
        social_security,
        traditional + pension + capital_gains,
        filing_status,
        tax_year=tax_year,
    )
    ss_taxable = ss_result.taxable_amount

    gross_income = traditional + taxable + roth + social_security + pension
    adjusted_gross_income = calculate_agi(
        traditional, capital_gains, ss_taxable, other_income=pension
    )

    deduction = calculate_deduction(
        filing_status,
        goal.use_itemized_deductions,
        goal.itemized_amount,
        tax_year=tax_year,
    )

    ordinary_income = traditional + pension + ss_taxable
    taxable_ordinary_income = max(ZERO, ordinary_income - deduction.amount)

    ordinary_result = calculate_ordinary_income_tax(
        taxable_ordinary_income,
        filing_status,
        _ordinary_sources(traditional, pension, ss_taxable, ss_result.taxable_percent),
        tax_year=tax_year,
    )
    gains_result = calculate_capital_gains_tax(
        capital_gains, taxable_ordinary_income, filing_status, tax_year=tax_year
    )

    taxable_income = taxable_ordinary_income + capital_gains
    state_tax = _state_tax(goal, taxable_income)

    federal_tax = ordinary_result.tax + gains_result.tax
    total_tax = federal_tax + state_tax

    return TaxBreakdown(
        ordinary_income=ordinary_income,
        qualified_dividends=ZERO,
        long_term_capital_gains=capital_gains,
        social_security_gross=social_security,
        social_security_taxable=ss_taxable,
        pension_gross=pension,
        pension_taxable=pension,
        roth_income=roth,
        gross_income=gross_income,
        adjusted_gross_income=adjusted_gross_income,
        deductions=deduction.amount,
        deduction_type=deduction.method,
        taxable_ordinary_income=taxable_ordinary_income,
        taxable_income=taxable_income,
        ordinary_income_tax=ordinary_result.tax,
        capital_gains_tax=gains_result.tax,
        state_tax=state_tax,
        federal_tax=federal_tax,
        total_tax=total_tax,
        bracket_fill=ordinary_result.bracket_fill,
        after_tax_income=gross_income - total_tax,
        effective_rate=_safe_ratio(total_tax, gross_income),
        effective_rate_on_agi=_safe_ratio(total_tax, adjusted_gross_income),
        effective_rate_on_taxable=_safe_ratio(total_tax, taxable_income),
        marginal_ordinary_rate=ordinary_result.marginal_rate,
        capital_gains_rate=gains_result.effective_rate,
        marginal_capital_gains_rate=get_capital_gains_rate(
            taxable_income, filing_status, tax_year=tax_year
        ),
        rmd_amount=strategy.rmd_amount,
        rmd_is_satisfied=(
            strategy.rmd_amount == ZERO or traditional >= strategy.rmd_amount
        ),
    )


# =============================================================================
# Gross-for-After-Tax Estimation
# =============================================================================


def estimate_tax_for_gross_income(
    gross_target: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> Decimal:
    """Rough federal tax on a gross amount treated as all ordinary income.

    Uses the standard deduction and ignores Social Security and capital
    gains; suitable only for sizing a first guess.
    """
    deduction = calculate_deduction(filing_status, False, tax_year=tax_year).amount
    taxable_income = max(ZERO, gross_target - deduction)
    return calculate_ordinary_income_tax(
        taxable_income, filing_status, tax_year=tax_year
    ).tax


def calculate_gross_for_after_tax(
    after_tax_target: Decimal,
    filing_status: FilingStatus | str,
    max_iterations: int = GROSS_SOLVER_MAX_ITERATIONS,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> Decimal:
    """Gross income needed to net a target after federal tax.

    Starts from target / 0.75 and repeatedly adds the after-tax shortfall.
    Stops within $100 of the target or after max_iterations, returning the
    latest estimate either way.

    Args:
        after_tax_target: Desired after-tax income.
        filing_status: Filing status enum or its code.
        max_iterations: Iteration cap.
        tax_year: Tax year (e.g., 2026).

    Returns:
        Estimated gross income, rounded to whole dollars.
    """
    gross_estimate = after_tax_target / GROSS_SOLVER_INITIAL_RETENTION

    for _ in range(max_iterations):
        estimated_tax = estimate_tax_for_gross_income(
            gross_estimate, filing_status, tax_year=tax_year
        )
        difference = after_tax_target - (gross_estimate - estimated_tax)
        if abs(difference) < GROSS_SOLVER_TOLERANCE:
            break
        gross_estimate += difference

    return round_dollars(gross_estimate)

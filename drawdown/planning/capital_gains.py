"""Long-term capital gains tax.

Capital gains brackets share the income scale of ordinary brackets.
Ordinary taxable income occupies the bottom of the stack first and gains
stack on top of it, so the same dollar of gain can be taxed at 0% for one
household and 15% for another depending on its ordinary income.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from drawdown.planning.models import FilingStatus, filing_status_key
from drawdown.tax.year_config import DEFAULT_TAX_YEAR, TaxBracket, get_tax_year_config

ZERO = Decimal("0")


@dataclass
class CapitalGainsBracketPortion:
    """Gains taxed inside a single capital gains bracket.

    Attributes:
        rate: Bracket rate as a fraction.
        amount: Gains falling in this bracket.
        tax: Tax on those gains.
    """

    rate: Decimal
    amount: Decimal
    tax: Decimal


@dataclass
class CapitalGainsTaxResult:
    """Result of the capital gains tax calculation.

    Attributes:
        tax: Total capital gains tax.
        effective_rate: Tax divided by gains (0 when there are no gains).
        bracket_breakdown: Portions of the gains per bracket, lowest first.
    """

    tax: Decimal
    effective_rate: Decimal
    bracket_breakdown: list[CapitalGainsBracketPortion]


def _capital_gains_brackets(
    filing_status: FilingStatus | str, tax_year: int
) -> tuple[TaxBracket, ...]:
    config = get_tax_year_config(tax_year)
    return config.capital_gains_brackets[filing_status_key(filing_status)]


def calculate_capital_gains_tax(
    long_term_capital_gains: Decimal,
    taxable_ordinary_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> CapitalGainsTaxResult:
    """Calculate long-term capital gains tax stacked on ordinary income.

    For each bracket, any part already filled by ordinary income is skipped;
    gains start at max(bracket start, income processed so far) and take as
    much of the remaining room as they need.

    Args:
        long_term_capital_gains: Realized long-term gains (<= 0 yields no tax).
        taxable_ordinary_income: Ordinary income after deductions.
        filing_status: Filing status enum or its code.
        tax_year: Tax year (e.g., 2026).

    Returns:
        CapitalGainsTaxResult with tax, effective rate and bracket breakdown.

    Example:
        >>> result = calculate_capital_gains_tax(
        ...     Decimal("20000"), Decimal("40000"), "single"
        ... )
        >>> result.tax  # 9,450 at 0%, 10,550 at 15%
        Decimal('1582.50')
    """
    if long_term_capital_gains <= ZERO:
        return CapitalGainsTaxResult(tax=ZERO, effective_rate=ZERO, bracket_breakdown=[])

    total_tax = ZERO
    remaining_gains = long_term_capital_gains
    breakdown: list[CapitalGainsBracketPortion] = []
    income_processed = max(ZERO, taxable_ordinary_income)

    for bracket in _capital_gains_brackets(filing_status, tax_year):
        if remaining_gains <= ZERO:
            break

        if bracket.max is not None and income_processed >= bracket.max:
            # Fully occupied by ordinary income
            continue

        gains_start = max(bracket.min, income_processed)
        if bracket.max is None:
            gains_in_bracket = remaining_gains
        else:
            gains_in_bracket = min(remaining_gains, bracket.max - gains_start)

        if gains_in_bracket > ZERO:
            tax_in_bracket = gains_in_bracket * bracket.rate
            total_tax += tax_in_bracket
            remaining_gains -= gains_in_bracket
            breakdown.append(
                CapitalGainsBracketPortion(
                    rate=bracket.rate, amount=gains_in_bracket, tax=tax_in_bracket
                )
            )

        if bracket.max is not None:
            income_processed = bracket.max

    return CapitalGainsTaxResult(
        tax=total_tax,
        effective_rate=total_tax / long_term_capital_gains,
        bracket_breakdown=breakdown,
    )


def get_capital_gains_rate(
    total_taxable_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> Decimal:
    """Marginal capital gains rate at a total taxable income level."""
    brackets = _capital_gains_brackets(filing_status, tax_year)
    for bracket in brackets:
        if bracket.max is None or total_taxable_income <= bracket.max:
            return bracket.rate
    return brackets[-1].rate


def get_zero_percent_room(
    taxable_ordinary_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> Decimal:
    """Gains that can still be realized at the 0% rate."""
    for bracket in _capital_gains_brackets(filing_status, tax_year):
        if bracket.rate == ZERO and bracket.max is not None:
            return max(ZERO, bracket.max - taxable_ordinary_income)
    return ZERO


def calculate_niit(
    net_investment_income: Decimal,
    magi: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> Decimal:
    """Calculate the 3.8% Net Investment Income Tax.

    Applies to the lesser of net investment income and the amount by which
    MAGI exceeds the filing-status threshold. The tax breakdown does not
    include NIIT; callers that want it add it themselves.

    Args:
        net_investment_income: Interest, dividends and realized gains.
        magi: Modified adjusted gross income.
        filing_status: Filing status enum or its code.
        tax_year: Tax year (e.g., 2026).

    Returns:
        NIIT owed.
    """
    config = get_tax_year_config(tax_year)
    threshold = config.niit_thresholds[filing_status_key(filing_status)]
    excess_income = max(ZERO, magi - threshold)
    if excess_income <= ZERO:
        return ZERO
    return min(max(ZERO, net_investment_income), excess_income) * config.niit_rate

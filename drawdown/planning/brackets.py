"""Ordinary income tax using progressive brackets.

Besides the tax itself, the calculator produces a bracket-fill trace: how
much income sits in each bracket and which sources that income came from.
Source attribution is proportional and only feeds the trace; it never
changes the tax total.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum

from drawdown.planning.models import FilingStatus, filing_status_key
from drawdown.tax.year_config import DEFAULT_TAX_YEAR, TaxBracket, get_tax_year_config

ZERO = Decimal("0")


class TaxCharacter(str, Enum):
    """How a dollar of income is taxed."""

    ORDINARY = "ordinary"
    CAPITAL_GAINS = "capital_gains"
    TAX_FREE = "tax_free"
    PARTIALLY_TAXABLE = "partially_taxable"


@dataclass(frozen=True)
class IncomeSource:
    """An income amount attributed to one account.

    Attributes:
        account: "traditional", "taxable", "roth", "social_security" or "pension".
        amount: Dollars attributed to this source.
        tax_character: How these dollars are taxed.
        description: Human-readable description.
    """

    account: str
    amount: Decimal
    tax_character: TaxCharacter
    description: str


@dataclass
class BracketFill:
    """How income fills one ordinary bracket.

    Attributes:
        rate: Bracket rate as a fraction.
        bracket_min: Bracket start.
        bracket_max: Bracket end, None for the top bracket.
        income_in_bracket: Taxable income occupying this bracket.
        tax_from_bracket: Tax generated by this bracket.
        sources: Proportional share of each attributed source in this bracket.
    """

    rate: Decimal
    bracket_min: Decimal
    bracket_max: Decimal | None
    income_in_bracket: Decimal
    tax_from_bracket: Decimal
    sources: list[IncomeSource] = field(default_factory=list)


@dataclass
class OrdinaryTaxResult:
    """Result of the ordinary income tax calculation.

    Attributes:
        tax: Total ordinary income tax.
        bracket_fill: Per-bracket fills, lowest bracket first.
        marginal_rate: Rate of the highest bracket that received income.
    """

    tax: Decimal
    bracket_fill: list[BracketFill]
    marginal_rate: Decimal


def _ordinary_brackets(
    filing_status: FilingStatus | str, tax_year: int
) -> tuple[TaxBracket, ...]:
    config = get_tax_year_config(tax_year)
    return config.ordinary_brackets[filing_status_key(filing_status)]


def calculate_ordinary_income_tax(
    taxable_income: Decimal,
    filing_status: FilingStatus | str,
    income_sources: list[IncomeSource] | None = None,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> OrdinaryTaxResult:
    """Calculate federal income tax on ordinary income.

    Walks the brackets from the bottom, consuming each bracket's width until
    the income is exhausted. When sources are supplied, each bracket's income
    is split across them in proportion to their share of the total.

    Args:
        taxable_income: Ordinary income after deductions. Values <= 0 yield no tax.
        filing_status: Filing status enum or its code.
        income_sources: Optional sources to attribute across brackets.
        tax_year: Tax year (e.g., 2026).

    Returns:
        OrdinaryTaxResult with tax, bracket fill and marginal rate.

    Raises:
        ValueError: If filing status or year not found.

    Example:
        >>> result = calculate_ordinary_income_tax(Decimal("50000"), "single")
        >>> result.tax
        Decimal('5752.00')
    """
    brackets = _ordinary_brackets(filing_status, tax_year)
    sources = income_sources or []
    total_source_amount = sum((s.amount for s in sources), ZERO)

    remaining_income = max(ZERO, taxable_income)
    total_tax = ZERO
    marginal_rate = ZERO
    bracket_fill: list[BracketFill] = []

    for bracket in brackets:
        if remaining_income <= ZERO:
            break

        if bracket.width is None:
            income_in_bracket = remaining_income
        else:
            income_in_bracket = min(remaining_income, bracket.width)
        tax_from_bracket = income_in_bracket * bracket.rate

        bracket_sources: list[IncomeSource] = []
        if total_source_amount > ZERO:
            for source in sources:
                share = income_in_bracket * source.amount / total_source_amount
                if share > ZERO:
                    bracket_sources.append(replace(source, amount=share))

        bracket_fill.append(
            BracketFill(
                rate=bracket.rate,
                bracket_min=bracket.min,
                bracket_max=bracket.max,
                income_in_bracket=income_in_bracket,
                tax_from_bracket=tax_from_bracket,
                sources=bracket_sources,
            )
        )

        total_tax += tax_from_bracket
        remaining_income -= income_in_bracket
        if income_in_bracket > ZERO:
            marginal_rate = bracket.rate

    return OrdinaryTaxResult(
        tax=total_tax,
        bracket_fill=bracket_fill,
        marginal_rate=marginal_rate,
    )


def find_marginal_bracket(
    taxable_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> TaxBracket:
    """Find the bracket a given taxable income falls into."""
    brackets = _ordinary_brackets(filing_status, tax_year)
    for bracket in brackets:
        if bracket.max is None or taxable_income <= bracket.max:
            return bracket
    return brackets[-1]


def get_room_in_bracket(
    current_taxable_income: Decimal,
    target_rate: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> Decimal | None:
    """Calculate how much more income fits below the top of a bracket.

    Args:
        current_taxable_income: Taxable income already realized.
        target_rate: Rate of the bracket to fill, as a fraction.
        filing_status: Filing status enum or its code.
        tax_year: Tax year (e.g., 2026).

    Returns:
        Remaining room, zero if already past the bracket or no bracket has
        that rate, None if the bracket is unbounded.
    """
    for bracket in _ordinary_brackets(filing_status, tax_year):
        if bracket.rate == target_rate:
            if bracket.max is None:
                return None
            return max(ZERO, bracket.max - current_taxable_income)
    return ZERO


def get_bracket_thresholds(
    filing_status: FilingStatus | str, tax_year: int = DEFAULT_TAX_YEAR
) -> list[tuple[Decimal, Decimal]]:
    """List (rate, threshold) pairs; the top bracket reports its start."""
    return [
        (bracket.rate, bracket.max if bracket.max is not None else bracket.min)
        for bracket in _ordinary_brackets(filing_status, tax_year)
    ]

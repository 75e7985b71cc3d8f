"""Deduction selection and AGI for retirement income.

Standard vs itemized is the only deduction logic the planner models:
itemized deductions are a single user-supplied number.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from drawdown.planning.formatting import format_currency
from drawdown.planning.models import (
    FILING_STATUS_LABELS,
    FilingStatus,
    filing_status_key,
)
from drawdown.tax.year_config import DEFAULT_TAX_YEAR, get_tax_year_config

ZERO = Decimal("0")


@dataclass
class DeductionResult:
    """Result of deduction calculation.

    Attributes:
        method: Either "standard" or "itemized".
        amount: The deduction amount to use.
        standard_amount: The standard deduction for this filing status.
        itemized_amount: The itemized total provided (0 when not itemizing).
        explanation: Plain-language reason for the choice.
    """

    method: str
    amount: Decimal
    standard_amount: Decimal
    itemized_amount: Decimal
    explanation: str


def get_standard_deduction(
    filing_status: FilingStatus | str, tax_year: int = DEFAULT_TAX_YEAR
) -> Decimal:
    """Get the standard deduction for a filing status and year.

    Args:
        filing_status: Filing status enum or its code ("single", "mfj", ...).
        tax_year: Tax year (e.g., 2026).

    Returns:
        Standard deduction amount.

    Raises:
        ValueError: If filing status or year not found.

    Example:
        >>> get_standard_deduction("single", 2026)
        Decimal('16100')
    """
    config = get_tax_year_config(tax_year)
    return config.standard_deductions[filing_status_key(filing_status)]


def calculate_deduction(
    filing_status: FilingStatus | str,
    use_itemized: bool,
    itemized_amount: Decimal | None = None,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> DeductionResult:
    """Calculate the deduction, selecting the larger of standard or itemized.

    Itemized amounts are only considered when the household opts in and
    supplies a positive total.

    Args:
        filing_status: Filing status enum or its code.
        use_itemized: Whether the household itemizes.
        itemized_amount: Total itemized deductions.
        tax_year: Tax year (e.g., 2026).

    Returns:
        DeductionResult with method, amount and explanation.

    Example:
        >>> result = calculate_deduction("single", True, Decimal("10000"))
        >>> result.method
        'standard'  # because $16,100 > $10,000
    """
    standard_amount = get_standard_deduction(filing_status, tax_year)
    label = FILING_STATUS_LABELS[FilingStatus(filing_status)]

    if not use_itemized or not itemized_amount:
        return DeductionResult(
            method="standard",
            amount=standard_amount,
            standard_amount=standard_amount,
            itemized_amount=ZERO,
            explanation=(
                f"Using the standard deduction of {format_currency(standard_amount)} "
                f"for {label} filers."
            ),
        )

    if itemized_amount > standard_amount:
        return DeductionResult(
            method="itemized",
            amount=itemized_amount,
            standard_amount=standard_amount,
            itemized_amount=itemized_amount,
            explanation=(
                f"Using itemized deductions of {format_currency(itemized_amount)}, "
                "which exceeds the standard deduction of "
                f"{format_currency(standard_amount)}."
            ),
        )

    return DeductionResult(
        method="standard",
        amount=standard_amount,
        standard_amount=standard_amount,
        itemized_amount=itemized_amount,
        explanation=(
            f"Using the standard deduction of {format_currency(standard_amount)} "
            "because it exceeds your itemized deductions of "
            f"{format_currency(itemized_amount)}."
        ),
    )


def calculate_agi(
    traditional_withdrawal: Decimal,
    capital_gains: Decimal,
    social_security_taxable: Decimal,
    other_income: Decimal = ZERO,
) -> Decimal:
    """Calculate Adjusted Gross Income for retirement income sources.

    Roth withdrawals and the basis portion of taxable-account sales are not
    income and never appear here.

    Args:
        traditional_withdrawal: Pre-tax account withdrawals.
        capital_gains: Realized gain portion of taxable-account withdrawals.
        social_security_taxable: Taxable portion of Social Security.
        other_income: Other fully taxable income such as pension.

    Returns:
        AGI.
    """
    return traditional_withdrawal + capital_gains + social_security_taxable + other_income

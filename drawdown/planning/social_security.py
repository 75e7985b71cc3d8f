"""Taxable portion of Social Security benefits.

Taxability is driven by provisional income:

    provisional = other income + tax-exempt interest + 50% of benefits

- At or below the first threshold: nothing is taxable
- Between the thresholds: up to 50% of benefits are taxable
- Above the second threshold: up to 85% of benefits are taxable

Married filing separately and head of household use the single thresholds.
This is a simplification of the statute (MFS living together has a zero
threshold) that the rest of the planner assumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from drawdown.planning.formatting import format_currency, round_dollars
from drawdown.planning.models import FilingStatus
from drawdown.tax.year_config import (
    DEFAULT_TAX_YEAR,
    SocialSecurityThresholds,
    get_tax_year_config,
)

ZERO = Decimal("0")
HALF = Decimal("0.5")
MAX_TAXABLE_SHARE = Decimal("0.85")


@dataclass
class SocialSecurityTaxResult:
    """Result of the Social Security taxability calculation.

    Attributes:
        taxable_amount: Taxable benefit, rounded to whole dollars.
        taxable_percent: Taxable share of the benefit as a percentage (0-85).
        provisional_income: Provisional income used for the tier test.
        explanation: Plain-language description of the tier applied.
    """

    taxable_amount: Decimal
    taxable_percent: Decimal
    provisional_income: Decimal
    explanation: str


def get_social_security_thresholds(
    filing_status: FilingStatus | str, tax_year: int = DEFAULT_TAX_YEAR
) -> SocialSecurityThresholds:
    """Thresholds for a filing status; only joint filers have their own row."""
    thresholds = get_tax_year_config(tax_year).social_security_thresholds
    if FilingStatus(filing_status) == FilingStatus.MARRIED_JOINT:
        return thresholds["mfj"]
    return thresholds["single"]


def calculate_social_security_taxable(
    benefit: Decimal,
    other_income: Decimal,
    filing_status: FilingStatus | str,
    tax_exempt_interest: Decimal = ZERO,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> SocialSecurityTaxResult:
    """Calculate the taxable portion of Social Security benefits.

    Args:
        benefit: Gross annual benefit.
        other_income: AGI excluding Social Security.
        filing_status: Filing status enum or its code.
        tax_exempt_interest: Tax-exempt interest (counts toward provisional income).
        tax_year: Tax year (e.g., 2026).

    Returns:
        SocialSecurityTaxResult with the taxable amount and explanation.

    Example:
        >>> result = calculate_social_security_taxable(
        ...     Decimal("30000"), Decimal("20000"), "single"
        ... )
        >>> result.taxable_amount  # provisional 35,000 is past the 85% tier
        Decimal('5350')
    """
    if benefit <= ZERO:
        return SocialSecurityTaxResult(
            taxable_amount=ZERO,
            taxable_percent=ZERO,
            provisional_income=ZERO,
            explanation="No Social Security benefits to tax.",
        )

    thresholds = get_social_security_thresholds(filing_status, tax_year)
    provisional_income = other_income + tax_exempt_interest + benefit * HALF

    if provisional_income <= thresholds.zero_threshold:
        taxable_amount = ZERO
        taxable_percent = ZERO
        explanation = (
            f"Your provisional income ({format_currency(provisional_income)}) is below "
            f"the first threshold ({format_currency(thresholds.zero_threshold)}), "
            "so none of your Social Security is taxable."
        )
    elif provisional_income <= thresholds.fifty_threshold:
        excess_over_first = provisional_income - thresholds.zero_threshold
        taxable_amount = min(benefit * HALF, excess_over_first * HALF)
        taxable_percent = taxable_amount / benefit * 100
        explanation = (
            f"Your provisional income ({format_currency(provisional_income)}) is between "
            "the thresholds, so up to 50% of your Social Security may be taxable. "
            f"Actual taxable amount: {format_currency(taxable_amount)} "
            f"({taxable_percent:.1f}%)."
        )
    else:
        base_amount = min(
            benefit * HALF,
            (thresholds.fifty_threshold - thresholds.zero_threshold) * HALF,
        )
        excess_over_second = provisional_income - thresholds.fifty_threshold
        taxable_amount = min(
            benefit * MAX_TAXABLE_SHARE,
            base_amount + excess_over_second * MAX_TAXABLE_SHARE,
        )
        taxable_percent = taxable_amount / benefit * 100
        explanation = (
            f"Your provisional income ({format_currency(provisional_income)}) exceeds "
            f"the second threshold ({format_currency(thresholds.fifty_threshold)}), "
            "so up to 85% of your Social Security is taxable. "
            f"Actual taxable amount: {format_currency(taxable_amount)} "
            f"({taxable_percent:.1f}%)."
        )

    return SocialSecurityTaxResult(
        taxable_amount=round_dollars(taxable_amount),
        taxable_percent=taxable_percent,
        provisional_income=provisional_income,
        explanation=explanation,
    )


def get_social_security_explanation(taxable_percent: Decimal) -> str:
    """Plain-language summary of how much of the benefit is taxed."""
    if taxable_percent == ZERO:
        return (
            "None of your Social Security benefit is subject to federal income tax "
            "because your combined income is below the taxable threshold."
        )
    if taxable_percent <= 50:
        return (
            f"{taxable_percent:.0f}% of your Social Security benefit is subject to "
            "federal income tax. This happens when your combined income falls "
            "between the two taxation thresholds."
        )
    return (
        f"{taxable_percent:.0f}% of your Social Security benefit is subject to "
        "federal income tax. This is the maximum taxable percentage, triggered "
        "when combined income exceeds the upper threshold."
    )


def get_ss_threshold_room(
    provisional_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> tuple[Decimal, Decimal]:
    """Additional provisional income before each taxability tier.

    Returns:
        (room before 50% tier starts, room before 85% tier starts).
    """
    thresholds = get_social_security_thresholds(filing_status, tax_year)
    return (
        max(ZERO, thresholds.zero_threshold - provisional_income),
        max(ZERO, thresholds.fifty_threshold - provisional_income),
    )

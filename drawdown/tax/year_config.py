"""Tax year-specific brackets, deductions and thresholds.

This module centralizes the constant tables the planning engine reads:
ordinary-income brackets, long-term capital gains brackets, standard
deductions, Social Security provisional-income thresholds and the Net
Investment Income Tax parameters. Tables are keyed by filing status code
("single", "mfj", "mfs", "hoh").

Example:
    >>> from drawdown.tax.year_config import get_tax_year_config
    >>> config = get_tax_year_config(2026)
    >>> print(config.standard_deductions["single"])
    16100
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TaxBracket:
    """A closed-open progressive tax segment.

    Attributes:
        min: Income at which the bracket starts.
        max: Income at which the bracket ends. None for the unbounded top bracket.
        rate: Rate applied to income inside the bracket, as a fraction.
    """

    min: Decimal
    max: Decimal | None
    rate: Decimal

    @property
    def width(self) -> Decimal | None:
        """Size of the bracket, or None when unbounded."""
        if self.max is None:
            return None
        return self.max - self.min


@dataclass(frozen=True)
class SocialSecurityThresholds:
    """Provisional-income thresholds for Social Security taxation.

    Attributes:
        zero_threshold: At or below this, no benefit is taxable.
        fifty_threshold: At or below this, up to 50% is taxable; above it, up to 85%.
    """

    zero_threshold: Decimal
    fifty_threshold: Decimal


def _brackets(upper_bounds: list[str | None], rates: list[str]) -> tuple[TaxBracket, ...]:
    """Build a contiguous bracket table from upper bounds and rates."""
    brackets: list[TaxBracket] = []
    lower = Decimal("0")
    for upper, rate in zip(upper_bounds, rates, strict=True):
        upper_value = Decimal(upper) if upper is not None else None
        brackets.append(TaxBracket(min=lower, max=upper_value, rate=Decimal(rate)))
        if upper_value is not None:
            lower = upper_value
    return tuple(brackets)


_ORDINARY_RATES = ["0.10", "0.12", "0.22", "0.24", "0.32", "0.35", "0.37"]
_CAPITAL_GAINS_RATES = ["0", "0.15", "0.20"]


@dataclass(frozen=True)
class TaxYearConfig:
    """Tax year-specific constants and thresholds.

    All monetary values are Decimal for precision in tax calculations.
    This dataclass is frozen to prevent accidental modification.

    Attributes:
        tax_year: The tax year these values apply to.
        ordinary_brackets: Ordinary income brackets by filing status.
        capital_gains_brackets: Long-term capital gains brackets by filing status.
        standard_deductions: Standard deduction by filing status.
        social_security_thresholds: Provisional income thresholds ("single", "mfj").
        niit_thresholds: MAGI thresholds for the 3.8% surtax by filing status.
        niit_rate: Net Investment Income Tax rate.
    """

    tax_year: int
    ordinary_brackets: dict[str, tuple[TaxBracket, ...]]
    capital_gains_brackets: dict[str, tuple[TaxBracket, ...]]
    standard_deductions: dict[str, Decimal]
    social_security_thresholds: dict[str, SocialSecurityThresholds]
    niit_thresholds: dict[str, Decimal]
    niit_rate: Decimal = Decimal("0.038")


# Social Security thresholds are set by statute and not indexed for inflation.
_SS_THRESHOLDS = {
    "single": SocialSecurityThresholds(
        zero_threshold=Decimal("25000"), fifty_threshold=Decimal("34000")
    ),
    "mfj": SocialSecurityThresholds(
        zero_threshold=Decimal("32000"), fifty_threshold=Decimal("44000")
    ),
}

_NIIT_THRESHOLDS = {
    "single": Decimal("200000"),
    "mfj": Decimal("250000"),
    "mfs": Decimal("125000"),
    "hoh": Decimal("200000"),
}


# 2025 Configuration - IRS published values
TAX_YEAR_2025 = TaxYearConfig(
    tax_year=2025,
    ordinary_brackets={
        "single": _brackets(
            ["11925", "48475", "103350", "197300", "250525", "626350", None],
            _ORDINARY_RATES,
        ),
        "mfj": _brackets(
            ["23850", "96950", "206700", "394600", "501050", "751600", None],
            _ORDINARY_RATES,
        ),
        "mfs": _brackets(
            ["11925", "48475", "103350", "197300", "250525", "375800", None],
            _ORDINARY_RATES,
        ),
        "hoh": _brackets(
            ["17000", "64850", "103350", "197300", "250500", "626350", None],
            _ORDINARY_RATES,
        ),
    },
    capital_gains_brackets={
        "single": _brackets(["48350", "533400", None], _CAPITAL_GAINS_RATES),
        "mfj": _brackets(["96700", "600050", None], _CAPITAL_GAINS_RATES),
        "mfs": _brackets(["48350", "300000", None], _CAPITAL_GAINS_RATES),
        "hoh": _brackets(["64750", "566700", None], _CAPITAL_GAINS_RATES),
    },
    standard_deductions={
        "single": Decimal("15750"),
        "mfj": Decimal("31500"),
        "mfs": Decimal("15750"),
        "hoh": Decimal("23625"),
    },
    social_security_thresholds=_SS_THRESHOLDS,
    niit_thresholds=_NIIT_THRESHOLDS,
)

# 2026 Configuration - inflation-adjusted values
TAX_YEAR_2026 = TaxYearConfig(
    tax_year=2026,
    ordinary_brackets={
        "single": _brackets(
            ["12400", "50400", "105700", "201775", "256225", "640600", None],
            _ORDINARY_RATES,
        ),
        "mfj": _brackets(
            ["24800", "100800", "211400", "403550", "512450", "768700", None],
            _ORDINARY_RATES,
        ),
        "mfs": _brackets(
            ["12400", "50400", "105700", "201775", "256225", "384350", None],
            _ORDINARY_RATES,
        ),
        "hoh": _brackets(
            ["17700", "67450", "105700", "201775", "256200", "640600", None],
            _ORDINARY_RATES,
        ),
    },
    capital_gains_brackets={
        "single": _brackets(["49450", "545500", None], _CAPITAL_GAINS_RATES),
        "mfj": _brackets(["98900", "613700", None], _CAPITAL_GAINS_RATES),
        "mfs": _brackets(["49450", "306850", None], _CAPITAL_GAINS_RATES),
        "hoh": _brackets(["66200", "579600", None], _CAPITAL_GAINS_RATES),
    },
    standard_deductions={
        "single": Decimal("16100"),
        "mfj": Decimal("32200"),
        "mfs": Decimal("16100"),
        "hoh": Decimal("24150"),
    },
    social_security_thresholds=_SS_THRESHOLDS,
    niit_thresholds=_NIIT_THRESHOLDS,
)

DEFAULT_TAX_YEAR = 2026

# Registry of available tax year configurations
TAX_YEAR_CONFIGS: dict[int, TaxYearConfig] = {
    2025: TAX_YEAR_2025,
    2026: TAX_YEAR_2026,
}


def get_tax_year_config(year: int) -> TaxYearConfig:
    """Get configuration for a specific tax year.

    Args:
        year: The tax year (e.g., 2026).

    Returns:
        TaxYearConfig for the specified year.

    Raises:
        ValueError: If no configuration exists for the requested year.

    Example:
        >>> config = get_tax_year_config(2026)
        >>> config.ordinary_brackets["single"][0].rate
        Decimal('0.10')
    """
    if year not in TAX_YEAR_CONFIGS:
        available = sorted(TAX_YEAR_CONFIGS.keys())
        raise ValueError(
            f"No tax configuration for year {year}. Available years: {available}"
        )
    return TAX_YEAR_CONFIGS[year]

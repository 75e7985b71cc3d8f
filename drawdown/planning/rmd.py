"""Required Minimum Distribution calculations.

RMD = prior year-end traditional balance / distribution period, where the
distribution period comes from the IRS Uniform Lifetime Table for the
owner's age at the end of the distribution year.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from drawdown.planning.formatting import format_currency, round_dollars
from drawdown.tax.rmd_tables import RMD_START_AGE, get_distribution_period

ZERO = Decimal("0")
DEFAULT_SCHEDULE_GROWTH_RATE = Decimal("0.05")


@dataclass
class RMDInfo:
    """RMD calculation result.

    Attributes:
        is_required: Whether an RMD applies this year.
        amount: Required distribution, rounded to whole dollars.
        age: Age at end of the distribution year.
        prior_year_balance: Balance the divisor was applied to.
        distribution_period: Life-expectancy divisor (0 when not required).
    """

    is_required: bool
    amount: Decimal
    age: int
    prior_year_balance: Decimal
    distribution_period: Decimal


@dataclass
class RMDScheduleYear:
    """One year of a stand-alone RMD projection."""

    year: int
    age: int
    start_balance: Decimal
    rmd: Decimal
    total_withdrawal: Decimal
    end_balance: Decimal


def is_rmd_required(age: int) -> bool:
    """Whether the owner has reached RMD age."""
    return age >= RMD_START_AGE


def get_years_until_rmd(current_age: int) -> int:
    """Years remaining before RMDs begin (0 once they apply)."""
    return max(0, RMD_START_AGE - current_age)


def calculate_rmd(age: int, prior_year_end_balance: Decimal) -> RMDInfo:
    """Calculate the Required Minimum Distribution for a year.

    Args:
        age: Age at end of distribution year.
        prior_year_end_balance: Traditional balance at end of prior year.

    Returns:
        RMDInfo with calculation details. Not required below the start age
        or when the balance is zero.

    Example:
        >>> calculate_rmd(73, Decimal("500000")).amount
        Decimal('18868')
    """
    if age < RMD_START_AGE or prior_year_end_balance <= ZERO:
        return RMDInfo(
            is_required=False,
            amount=ZERO,
            age=age,
            prior_year_balance=prior_year_end_balance,
            distribution_period=ZERO,
        )

    distribution_period = get_distribution_period(age)
    return RMDInfo(
        is_required=True,
        amount=round_dollars(prior_year_end_balance / distribution_period),
        age=age,
        prior_year_balance=prior_year_end_balance,
        distribution_period=distribution_period,
    )


def project_rmd_schedule(
    current_age: int,
    end_age: int,
    current_balance: Decimal,
    growth_rate: Decimal = DEFAULT_SCHEDULE_GROWTH_RATE,
    additional_withdrawals: Decimal = ZERO,
    start_year: int | None = None,
) -> list[RMDScheduleYear]:
    """Project RMDs year by year for a single traditional balance.

    Independent of the full projection engine: no other accounts, no taxes.
    Each year's RMD uses that year's starting balance as the prior year-end
    balance.

    Args:
        current_age: Starting age.
        end_age: Last age to project (inclusive).
        current_balance: Current traditional balance.
        growth_rate: Annual growth applied after withdrawals.
        additional_withdrawals: Extra withdrawal on top of the RMD each year.
        start_year: Calendar year of the first row (defaults to this year).

    Returns:
        One RMDScheduleYear per age.
    """
    first_year = start_year if start_year is not None else date.today().year
    schedule: list[RMDScheduleYear] = []
    balance = current_balance

    for age in range(current_age, end_age + 1):
        rmd = calculate_rmd(age, balance).amount
        total_withdrawal = min(rmd + additional_withdrawals, balance)
        end_balance = max(ZERO, (balance - total_withdrawal) * (1 + growth_rate))

        schedule.append(
            RMDScheduleYear(
                year=first_year + (age - current_age),
                age=age,
                start_balance=round_dollars(balance),
                rmd=rmd,
                total_withdrawal=round_dollars(total_withdrawal),
                end_balance=round_dollars(end_balance),
            )
        )
        balance = end_balance

    return schedule


def calculate_total_rmds(
    current_age: int,
    end_age: int,
    current_balance: Decimal,
    growth_rate: Decimal = DEFAULT_SCHEDULE_GROWTH_RATE,
) -> Decimal:
    """Sum of RMDs over a planning horizon with no extra withdrawals."""
    schedule = project_rmd_schedule(current_age, end_age, current_balance, growth_rate)
    return sum((row.rmd for row in schedule), ZERO)


def get_rmd_explanation(rmd_info: RMDInfo) -> str:
    """Plain-language description of an RMD result."""
    if not rmd_info.is_required:
        if rmd_info.age < RMD_START_AGE:
            years_until = RMD_START_AGE - rmd_info.age
            plural = "s" if years_until != 1 else ""
            return (
                "You won't need to take Required Minimum Distributions for another "
                f"{years_until} year{plural} (until age {RMD_START_AGE})."
            )
        return "No RMD is required because you have no Traditional account balance."

    return (
        f"At age {rmd_info.age}, you must withdraw at least "
        f"{format_currency(rmd_info.amount)} from your Traditional retirement "
        "accounts. This is your Required Minimum Distribution (RMD), calculated by "
        "dividing your prior year-end balance of "
        f"{format_currency(rmd_info.prior_year_balance)} by "
        f"{rmd_info.distribution_period:.1f} (your life expectancy factor from the "
        "IRS tables)."
    )

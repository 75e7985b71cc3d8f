"""Guyton-Klinger withdrawal guardrails.

A dynamic spending policy checked independently of the goal-driven
strategy. The withdrawal rate counts only what comes out of the portfolio;
fixed income such as Social Security and pensions is excluded.

Default rules:
- Initial withdrawal rate 5%
- Upper guardrail at initial + 20% (6%): cut spending 10%
- Lower guardrail at initial - 20% (4%): raise spending 10%
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from drawdown.planning.formatting import format_currency, format_percentage

ZERO = Decimal("0")


class GuardrailStatus(str, Enum):
    WITHIN = "within"
    ABOVE = "above"
    BELOW = "below"


@dataclass(frozen=True)
class GuardrailsConfig:
    """Guardrail parameters, all fractions."""

    initial_rate: Decimal = Decimal("0.05")
    upper_buffer: Decimal = Decimal("0.20")
    lower_buffer: Decimal = Decimal("0.20")
    adjustment_percent: Decimal = Decimal("0.10")


DEFAULT_GUARDRAILS = GuardrailsConfig()


@dataclass
class GuardrailsResult:
    """Guardrail thresholds and where the current withdrawal falls.

    Attributes:
        current_rate: Portfolio withdrawal divided by portfolio value.
        initial_rate: Target initial rate.
        upper_guardrail: Rate that triggers a spending cut.
        lower_guardrail: Rate that triggers a spending increase.
        status: Position relative to the guardrails.
        sustainable_withdrawal: Total income at the initial rate plus fixed income.
        max_safe_withdrawal: Total income at the upper guardrail plus fixed income.
        recommendation: Plain-language next step.
    """

    current_rate: Decimal
    initial_rate: Decimal
    upper_guardrail: Decimal
    lower_guardrail: Decimal
    status: GuardrailStatus
    sustainable_withdrawal: Decimal
    max_safe_withdrawal: Decimal
    recommendation: str


@dataclass
class GuardrailsAssessment:
    """Simplified sustainability verdict built on GuardrailsResult."""

    is_sustainable: bool
    is_risky: bool
    sustainable_income: Decimal
    max_income: Decimal
    withdrawal_rate: Decimal
    message: str


def calculate_guardrails(
    portfolio_value: Decimal,
    current_withdrawal: Decimal,
    fixed_income: Decimal = ZERO,
    config: GuardrailsConfig = DEFAULT_GUARDRAILS,
) -> GuardrailsResult:
    """Calculate guardrail thresholds and the current withdrawal's status.

    Args:
        portfolio_value: Total invested balance.
        current_withdrawal: Total annual income including fixed income.
        fixed_income: Social Security and pension, not drawn from the portfolio.
        config: Guardrail parameters.

    Returns:
        GuardrailsResult. A zero rate (no portfolio withdrawal or no
        portfolio) is reported as within the guardrails.
    """
    portfolio_withdrawal = max(ZERO, current_withdrawal - fixed_income)
    current_rate = (
        portfolio_withdrawal / portfolio_value if portfolio_value > ZERO else ZERO
    )

    upper_guardrail = config.initial_rate * (1 + config.upper_buffer)
    lower_guardrail = config.initial_rate * (1 - config.lower_buffer)
    adjustment = portfolio_withdrawal * config.adjustment_percent
    rate_text = format_percentage(current_rate)

    if current_rate > upper_guardrail:
        status = GuardrailStatus.ABOVE
        recommendation = (
            f"Withdrawal rate ({rate_text}) exceeds upper guardrail. Consider "
            f"reducing portfolio withdrawals by {format_currency(adjustment)}/year."
        )
    elif ZERO < current_rate < lower_guardrail:
        status = GuardrailStatus.BELOW
        recommendation = (
            f"Withdrawal rate ({rate_text}) is below lower guardrail. You could "
            f"increase spending by {format_currency(adjustment)}/year."
        )
    else:
        status = GuardrailStatus.WITHIN
        recommendation = (
            f"Withdrawal rate ({rate_text}) is within guardrails. Current strategy "
            "is sustainable."
        )

    return GuardrailsResult(
        current_rate=current_rate,
        initial_rate=config.initial_rate,
        upper_guardrail=upper_guardrail,
        lower_guardrail=lower_guardrail,
        status=status,
        sustainable_withdrawal=portfolio_value * config.initial_rate + fixed_income,
        max_safe_withdrawal=portfolio_value * upper_guardrail + fixed_income,
        recommendation=recommendation,
    )


def get_guardrails_assessment(
    portfolio_value: Decimal,
    target_income: Decimal,
    fixed_income: Decimal = ZERO,
) -> GuardrailsAssessment:
    """Summarize whether a target income is sustainable under default guardrails."""
    result = calculate_guardrails(portfolio_value, target_income, fixed_income)

    is_sustainable = result.status != GuardrailStatus.ABOVE
    # Between the initial rate and the upper guardrail.
    is_risky = result.current_rate > result.initial_rate

    if result.status == GuardrailStatus.ABOVE:
        message = (
            f"Above upper guardrail ({format_percentage(result.upper_guardrail, 0)}). "
            "High depletion risk."
        )
    elif is_risky:
        message = "Above initial rate but within guardrails. Monitor closely."
    elif result.status == GuardrailStatus.BELOW:
        message = "Below lower guardrail. Room to increase spending."
    else:
        message = "Within target range. Sustainable strategy."

    return GuardrailsAssessment(
        is_sustainable=is_sustainable,
        is_risky=is_risky,
        sustainable_income=result.sustainable_withdrawal,
        max_income=result.max_safe_withdrawal,
        withdrawal_rate=result.current_rate,
        message=message,
    )

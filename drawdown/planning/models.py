"""Pydantic models for retirement withdrawal planning inputs.

This module defines validated data models for:
- Account slots: TaxableAccount, TraditionalAccount, RothAccount
- Forced income: SocialSecurityIncome, PensionIncome
- Portfolio: The household's optional account and income slots
- IncomeGoal: Target income, filing status, ages, deductions and state tax
- WithdrawalStrategy: Dollar amounts drawn from each source for one year
- ProjectionAssumptions: Growth, inflation and COLA for multi-year projections

All monetary fields use Decimal for precision. Missing accounts are None and
are treated as a zero balance everywhere.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from drawdown.tax.year_config import DEFAULT_TAX_YEAR

ZERO = Decimal("0")


class FilingStatus(str, Enum):
    """Federal filing status; selects the bracket and threshold row."""

    SINGLE = "single"
    MARRIED_JOINT = "mfj"
    MARRIED_SEPARATE = "mfs"
    HEAD_OF_HOUSEHOLD = "hoh"


FILING_STATUS_LABELS: dict[FilingStatus, str] = {
    FilingStatus.SINGLE: "Single",
    FilingStatus.MARRIED_JOINT: "Married Filing Jointly",
    FilingStatus.MARRIED_SEPARATE: "Married Filing Separately",
    FilingStatus.HEAD_OF_HOUSEHOLD: "Head of Household",
}


def filing_status_key(filing_status: FilingStatus | str) -> str:
    """Return the table key for a filing status ("single", "mfj", ...).

    Raises:
        ValueError: If the value is not a known filing status.
    """
    return FilingStatus(filing_status).value


class TargetType(str, Enum):
    """Whether the income goal is measured before or after tax."""

    AFTER_TAX = "after_tax"
    GROSS = "gross"


class StateTaxMethod(str, Enum):
    """How state income tax is estimated."""

    NONE = "none"
    RATE = "rate"
    FIXED = "fixed"


# =============================================================================
# Accounts and Income Sources
# =============================================================================


class TaxableAccount(BaseModel):
    """Brokerage account taxed on realized long-term gains.

    Cost basis above balance is accepted: the account is in a loss position,
    its gains ratio is clamped to zero and withdrawals realize no gain.
    """

    balance: Decimal = Field(ge=0, description="Current market value")
    cost_basis: Decimal = Field(ge=0, description="Total cost basis")

    @property
    def unrealized_gains(self) -> Decimal:
        """Balance minus cost basis (negative for a loss position)."""
        return self.balance - self.cost_basis

    @property
    def gains_ratio(self) -> Decimal:
        """Fraction of each withdrawn dollar that is a realized gain."""
        if self.balance <= ZERO:
            return ZERO
        return max(ZERO, self.unrealized_gains / self.balance)


class TraditionalAccount(BaseModel):
    """Pre-tax 401(k)/IRA balance; withdrawals are ordinary income."""

    balance: Decimal = Field(ge=0, description="Current balance")
    prior_year_end_balance: Decimal | None = Field(
        default=None,
        ge=0,
        description="Balance at end of prior year, used for RMD (defaults to balance)",
    )

    @property
    def rmd_balance(self) -> Decimal:
        """Balance the RMD divisor is applied to."""
        if self.prior_year_end_balance is None:
            return self.balance
        return self.prior_year_end_balance


class RothAccount(BaseModel):
    """Roth account; qualified withdrawals are tax-free."""

    balance: Decimal = Field(ge=0, description="Current balance")


class SocialSecurityIncome(BaseModel):
    """Annual Social Security benefit."""

    annual_benefit: Decimal = Field(ge=0, description="Gross annual benefit")


class PensionIncome(BaseModel):
    """Annual pension benefit with its own cost-of-living adjustment."""

    annual_benefit: Decimal = Field(ge=0, description="Gross annual benefit")
    cola: Decimal = Field(
        default=ZERO, description="Annual COLA as a fraction (0.02 for 2%)"
    )


class Portfolio(BaseModel):
    """Household accounts and forced income sources.

    Every slot is optional; an absent slot behaves as a zero balance or a zero
    benefit in all calculations.
    """

    taxable: TaxableAccount | None = None
    traditional: TraditionalAccount | None = None
    roth: RothAccount | None = None
    social_security: SocialSecurityIncome | None = None
    pension: PensionIncome | None = None

    @property
    def taxable_balance(self) -> Decimal:
        return self.taxable.balance if self.taxable else ZERO

    @property
    def traditional_balance(self) -> Decimal:
        return self.traditional.balance if self.traditional else ZERO

    @property
    def roth_balance(self) -> Decimal:
        return self.roth.balance if self.roth else ZERO

    @property
    def social_security_benefit(self) -> Decimal:
        return self.social_security.annual_benefit if self.social_security else ZERO

    @property
    def pension_benefit(self) -> Decimal:
        return self.pension.annual_benefit if self.pension else ZERO

    @property
    def total_balance(self) -> Decimal:
        """Sum of the three investment account balances."""
        return self.taxable_balance + self.traditional_balance + self.roth_balance


# =============================================================================
# Goal and Strategy
# =============================================================================


class IncomeGoal(BaseModel):
    """Annual income target and the household facts that shape its tax."""

    target_type: TargetType = Field(description="Whether amount is gross or after-tax")
    amount: Decimal = Field(ge=0, description="Target annual income")
    filing_status: FilingStatus = Field(description="Federal filing status")
    primary_age: int = Field(ge=0, le=130, description="Age of primary account owner")
    spouse_age: int | None = Field(default=None, ge=0, le=130)
    use_itemized_deductions: bool = False
    itemized_amount: Decimal | None = Field(default=None, ge=0)
    state_tax_method: StateTaxMethod = StateTaxMethod.NONE
    state_tax_rate: Decimal | None = Field(
        default=None, ge=0, le=1, description="State rate as a fraction"
    )
    state_tax_fixed_amount: Decimal | None = Field(default=None, ge=0)
    planning_horizon: int = Field(
        default=95, ge=0, le=130, description="End age for multi-year planning"
    )
    tax_year: int = Field(default=DEFAULT_TAX_YEAR, description="Tax table year")


class WithdrawalStrategy(BaseModel):
    """Dollar amounts drawn from each source for a single year.

    The RMD is part of the traditional withdrawal, never in addition to it.
    Amounts above account balances are allowed here and reported by
    validate_strategy.
    """

    traditional_withdrawal: Decimal = Field(default=ZERO, ge=0)
    taxable_withdrawal: Decimal = Field(default=ZERO, ge=0)
    roth_withdrawal: Decimal = Field(default=ZERO, ge=0)
    social_security_income: Decimal = Field(default=ZERO, ge=0)
    pension_income: Decimal = Field(default=ZERO, ge=0)
    rmd_amount: Decimal = Field(default=ZERO, ge=0)
    is_system_generated: bool = False

    @property
    def total_withdrawal(self) -> Decimal:
        """All five sources at gross value."""
        return (
            self.traditional_withdrawal
            + self.taxable_withdrawal
            + self.roth_withdrawal
            + self.social_security_income
            + self.pension_income
        )


class ProjectionAssumptions(BaseModel):
    """Economic assumptions applied in every projected year."""

    growth_rate: Decimal = Field(default=Decimal("0.05"), ge=-1)
    inflation_rate: Decimal = Field(default=Decimal("0.025"), ge=-1)
    social_security_cola: Decimal = Field(default=Decimal("0.025"), ge=-1)

    @model_validator(mode="after")
    def check_rates_are_fractions(self) -> ProjectionAssumptions:
        """Reject percentages entered as whole numbers (5 instead of 0.05)."""
        for name in ("growth_rate", "inflation_rate", "social_security_cola"):
            value = getattr(self, name)
            if value > Decimal("1"):
                raise ValueError(f"{name} must be a fraction (0.05 for 5%), got {value}")
        return self

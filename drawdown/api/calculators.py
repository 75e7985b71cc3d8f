"""Stand-alone tax calculator endpoints.

Each leaf calculator is callable on its own so a client can visualize
intermediate results without building a full strategy.
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, Field, model_validator

from drawdown.api.deps import resolve_tax_year
from drawdown.planning.brackets import OrdinaryTaxResult, calculate_ordinary_income_tax
from drawdown.planning.capital_gains import (
    CapitalGainsTaxResult,
    calculate_capital_gains_tax,
    get_zero_percent_room,
)
from drawdown.planning.models import FilingStatus
from drawdown.planning.rmd import (
    RMDInfo,
    RMDScheduleYear,
    calculate_rmd,
    get_rmd_explanation,
    get_years_until_rmd,
    project_rmd_schedule,
)
from drawdown.planning.social_security import (
    SocialSecurityTaxResult,
    calculate_social_security_taxable,
)

router = APIRouter(prefix="/api/tax", tags=["tax"])

ZERO = Decimal("0")


class OrdinaryTaxRequest(BaseModel):
    taxable_income: Decimal
    filing_status: FilingStatus
    tax_year: int | None = None


class CapitalGainsRequest(BaseModel):
    long_term_capital_gains: Decimal
    taxable_ordinary_income: Decimal = ZERO
    filing_status: FilingStatus
    tax_year: int | None = None


class CapitalGainsResponse(BaseModel):
    result: CapitalGainsTaxResult
    zero_percent_room: Decimal


class SocialSecurityRequest(BaseModel):
    benefit: Decimal = Field(ge=0)
    other_income: Decimal = ZERO
    filing_status: FilingStatus
    tax_exempt_interest: Decimal = Field(default=ZERO, ge=0)
    tax_year: int | None = None


class RMDRequest(BaseModel):
    age: int = Field(ge=0, le=130)
    prior_year_end_balance: Decimal = Field(ge=0)


class RMDResponse(BaseModel):
    rmd: RMDInfo
    years_until_rmd: int
    explanation: str


class RMDScheduleRequest(BaseModel):
    """Inputs for a stand-alone RMD schedule."""

    current_age: int = Field(ge=0, le=130)
    end_age: int = Field(ge=0, le=130)
    current_balance: Decimal = Field(ge=0)
    growth_rate: Decimal = Field(default=Decimal("0.05"), ge=-1, le=1)
    additional_withdrawals: Decimal = Field(default=ZERO, ge=0)
    start_year: int | None = Field(default=None, ge=1900, le=2200)

    @model_validator(mode="after")
    def check_age_range(self) -> RMDScheduleRequest:
        if self.end_age < self.current_age:
            raise ValueError("end_age must not be before current_age")
        return self


class RMDScheduleResponse(BaseModel):
    schedule: list[RMDScheduleYear]
    total_rmds: Decimal


@router.post("/ordinary", response_model=OrdinaryTaxResult)
def ordinary_income_tax(request: OrdinaryTaxRequest) -> OrdinaryTaxResult:
    """Progressive tax and bracket fill for ordinary taxable income."""
    return calculate_ordinary_income_tax(
        request.taxable_income,
        request.filing_status,
        tax_year=resolve_tax_year(request.tax_year),
    )


@router.post("/capital-gains", response_model=CapitalGainsResponse)
def capital_gains_tax(request: CapitalGainsRequest) -> CapitalGainsResponse:
    """Long-term gains tax stacked on top of ordinary income."""
    tax_year = resolve_tax_year(request.tax_year)
    return CapitalGainsResponse(
        result=calculate_capital_gains_tax(
            request.long_term_capital_gains,
            request.taxable_ordinary_income,
            request.filing_status,
            tax_year=tax_year,
        ),
        zero_percent_room=get_zero_percent_room(
            request.taxable_ordinary_income, request.filing_status, tax_year=tax_year
        ),
    )


@router.post("/social-security", response_model=SocialSecurityTaxResult)
def social_security_taxable(request: SocialSecurityRequest) -> SocialSecurityTaxResult:
    """Taxable portion of Social Security benefits."""
    return calculate_social_security_taxable(
        request.benefit,
        request.other_income,
        request.filing_status,
        tax_exempt_interest=request.tax_exempt_interest,
        tax_year=resolve_tax_year(request.tax_year),
    )


@router.post("/rmd", response_model=RMDResponse)
def required_minimum_distribution(request: RMDRequest) -> RMDResponse:
    """Required Minimum Distribution for one year."""
    rmd_info = calculate_rmd(request.age, request.prior_year_end_balance)
    return RMDResponse(
        rmd=rmd_info,
        years_until_rmd=get_years_until_rmd(request.age),
        explanation=get_rmd_explanation(rmd_info),
    )


@router.post("/rmd/schedule", response_model=RMDScheduleResponse)
def rmd_schedule(request: RMDScheduleRequest) -> RMDScheduleResponse:
    """Year-by-year RMDs for a single traditional balance."""
    schedule = project_rmd_schedule(
        request.current_age,
        request.end_age,
        request.current_balance,
        growth_rate=request.growth_rate,
        additional_withdrawals=request.additional_withdrawals,
        start_year=request.start_year,
    )
    return RMDScheduleResponse(
        schedule=schedule,
        total_rmds=sum((row.rmd for row in schedule), ZERO),
    )

"""Planning endpoints: strategy, breakdown, projection and guardrails."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from drawdown.api.deps import resolve_goal
from drawdown.core.logging import get_logger
from drawdown.planning.calculator import TaxBreakdown, calculate_tax_breakdown
from drawdown.planning.guardrails import (
    GuardrailsAssessment,
    GuardrailsResult,
    calculate_guardrails,
    get_guardrails_assessment,
)
from drawdown.planning.models import (
    IncomeGoal,
    Portfolio,
    ProjectionAssumptions,
    WithdrawalStrategy,
)
from drawdown.planning.projection import (
    ProjectionStats,
    ProjectionYear,
    RetirementProjection,
    generate_retirement_projection,
    get_projection_stats,
    get_summary_years,
)
from drawdown.planning.strategy import (
    StrategyValidation,
    explain_strategy,
    generate_strategy,
    validate_strategy,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/plans", tags=["plans"])


class StrategyRequest(BaseModel):
    """Portfolio and goal to generate a strategy for."""

    portfolio: Portfolio
    goal: IncomeGoal


class StrategyResponse(BaseModel):
    """Generated strategy with its tax breakdown and explanation."""

    strategy: WithdrawalStrategy
    breakdown: TaxBreakdown
    validation: StrategyValidation
    explanation: list[str]


class BreakdownRequest(BaseModel):
    """A (possibly hand-edited) strategy to evaluate."""

    strategy: WithdrawalStrategy
    portfolio: Portfolio
    goal: IncomeGoal


class BreakdownResponse(BaseModel):
    """Tax breakdown and validation for a submitted strategy."""

    breakdown: TaxBreakdown
    validation: StrategyValidation
    explanation: list[str]


class ProjectionRequest(BaseModel):
    """Inputs for a multi-year projection."""

    portfolio: Portfolio
    goal: IncomeGoal
    assumptions: ProjectionAssumptions | None = None
    initial_strategy: WithdrawalStrategy | None = None
    start_year: int | None = Field(default=None, ge=1900, le=2200)


class ProjectionResponse(BaseModel):
    """Projection with aggregate statistics and summary rows."""

    projection: RetirementProjection
    stats: ProjectionStats
    summary_years: list[ProjectionYear]


class GuardrailsRequest(BaseModel):
    """Portfolio value and spending to check against guardrails."""

    portfolio_value: Decimal = Field(ge=0)
    current_withdrawal: Decimal = Field(ge=0, description="Total income incl. fixed")
    fixed_income: Decimal = Field(default=Decimal("0"), ge=0)


class GuardrailsResponse(BaseModel):
    """Guardrail thresholds and the simplified assessment."""

    result: GuardrailsResult
    assessment: GuardrailsAssessment


@router.post("/strategy", response_model=StrategyResponse)
def create_strategy(request: StrategyRequest) -> StrategyResponse:
    """Generate a tax-efficient withdrawal strategy for the goal."""
    goal = resolve_goal(request.goal)
    strategy = generate_strategy(request.portfolio, goal)
    breakdown = calculate_tax_breakdown(strategy, request.portfolio, goal)

    return StrategyResponse(
        strategy=strategy,
        breakdown=breakdown,
        validation=validate_strategy(strategy, request.portfolio),
        explanation=explain_strategy(strategy, breakdown),
    )


@router.post("/breakdown", response_model=BreakdownResponse)
def create_breakdown(request: BreakdownRequest) -> BreakdownResponse:
    """Calculate taxes for a user-supplied strategy and report violations."""
    goal = resolve_goal(request.goal)
    breakdown = calculate_tax_breakdown(request.strategy, request.portfolio, goal)
    validation = validate_strategy(request.strategy, request.portfolio)

    if not validation.valid:
        logger.info("strategy_validation_failed", errors=validation.errors)

    return BreakdownResponse(
        breakdown=breakdown,
        validation=validation,
        explanation=explain_strategy(request.strategy, breakdown),
    )


@router.post("/projection", response_model=ProjectionResponse)
def create_projection(request: ProjectionRequest) -> ProjectionResponse:
    """Project the plan year by year through the planning horizon."""
    projection = generate_retirement_projection(
        request.portfolio,
        resolve_goal(request.goal),
        assumptions=request.assumptions,
        initial_strategy=request.initial_strategy,
        start_year=request.start_year,
    )

    return ProjectionResponse(
        projection=projection,
        stats=get_projection_stats(projection),
        summary_years=get_summary_years(projection),
    )


@router.post("/guardrails", response_model=GuardrailsResponse)
def check_guardrails(request: GuardrailsRequest) -> GuardrailsResponse:
    """Check spending against Guyton-Klinger guardrails."""
    return GuardrailsResponse(
        result=calculate_guardrails(
            request.portfolio_value, request.current_withdrawal, request.fixed_income
        ),
        assessment=get_guardrails_assessment(
            request.portfolio_value, request.current_withdrawal, request.fixed_income
        ),
    )

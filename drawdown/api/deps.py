"""Shared request helpers for API endpoints."""

from drawdown.core.config import settings
from drawdown.planning.models import IncomeGoal


def resolve_tax_year(tax_year: int | None) -> int:
    """Use the configured default when a request names no tax year."""
    return tax_year if tax_year is not None else settings.default_tax_year


def resolve_goal(goal: IncomeGoal) -> IncomeGoal:
    """Apply the configured default tax year to a goal that did not set one."""
    if "tax_year" in goal.model_fields_set:
        return goal
    return goal.model_copy(update={"tax_year": settings.default_tax_year})

"""Retirement withdrawal planning engine.

This module provides:
- Leaf calculators for ordinary income, capital gains, Social Security and RMDs
- A tax breakdown orchestrator for a single year's withdrawal strategy
- A heuristic strategy generator with validation and explanations
- A multi-year projection engine
- Guyton-Klinger guardrails
"""

from drawdown.planning.brackets import (
    BracketFill,
    IncomeSource,
    OrdinaryTaxResult,
    TaxCharacter,
    calculate_ordinary_income_tax,
    find_marginal_bracket,
    get_bracket_thresholds,
    get_room_in_bracket,
)
from drawdown.planning.calculator import (
    TaxBreakdown,
    calculate_gross_for_after_tax,
    calculate_tax_breakdown,
    estimate_tax_for_gross_income,
)
from drawdown.planning.capital_gains import (
    CapitalGainsBracketPortion,
    CapitalGainsTaxResult,
    calculate_capital_gains_tax,
    calculate_niit,
    get_capital_gains_rate,
    get_zero_percent_room,
)
from drawdown.planning.deductions import (
    DeductionResult,
    calculate_agi,
    calculate_deduction,
    get_standard_deduction,
)
from drawdown.planning.guardrails import (
    DEFAULT_GUARDRAILS,
    GuardrailsAssessment,
    GuardrailsConfig,
    GuardrailsResult,
    GuardrailStatus,
    calculate_guardrails,
    get_guardrails_assessment,
)
from drawdown.planning.models import (
    FilingStatus,
    IncomeGoal,
    PensionIncome,
    Portfolio,
    ProjectionAssumptions,
    RothAccount,
    SocialSecurityIncome,
    StateTaxMethod,
    TargetType,
    TaxableAccount,
    TraditionalAccount,
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
from drawdown.planning.rmd import (
    RMDInfo,
    RMDScheduleYear,
    calculate_rmd,
    calculate_total_rmds,
    get_rmd_explanation,
    get_years_until_rmd,
    is_rmd_required,
    project_rmd_schedule,
)
from drawdown.planning.social_security import (
    SocialSecurityTaxResult,
    calculate_social_security_taxable,
    get_social_security_explanation,
    get_ss_threshold_room,
)
from drawdown.planning.strategy import (
    StrategyValidation,
    explain_strategy,
    generate_strategy,
    validate_strategy,
)

__all__ = [
    # Models
    "FilingStatus",
    "IncomeGoal",
    "PensionIncome",
    "Portfolio",
    "ProjectionAssumptions",
    "RothAccount",
    "SocialSecurityIncome",
    "StateTaxMethod",
    "TargetType",
    "TaxableAccount",
    "TraditionalAccount",
    "WithdrawalStrategy",
    # Brackets
    "BracketFill",
    "IncomeSource",
    "OrdinaryTaxResult",
    "TaxCharacter",
    "calculate_ordinary_income_tax",
    "find_marginal_bracket",
    "get_bracket_thresholds",
    "get_room_in_bracket",
    # Capital gains
    "CapitalGainsBracketPortion",
    "CapitalGainsTaxResult",
    "calculate_capital_gains_tax",
    "calculate_niit",
    "get_capital_gains_rate",
    "get_zero_percent_room",
    # Social Security
    "SocialSecurityTaxResult",
    "calculate_social_security_taxable",
    "get_social_security_explanation",
    "get_ss_threshold_room",
    # RMD
    "RMDInfo",
    "RMDScheduleYear",
    "calculate_rmd",
    "calculate_total_rmds",
    "get_rmd_explanation",
    "get_years_until_rmd",
    "is_rmd_required",
    "project_rmd_schedule",
    # Deductions
    "DeductionResult",
    "calculate_agi",
    "calculate_deduction",
    "get_standard_deduction",
    # Orchestrator
    "TaxBreakdown",
    "calculate_gross_for_after_tax",
    "calculate_tax_breakdown",
    "estimate_tax_for_gross_income",
    # Strategy
    "StrategyValidation",
    "explain_strategy",
    "generate_strategy",
    "validate_strategy",
    # Projection
    "ProjectionStats",
    "ProjectionYear",
    "RetirementProjection",
    "generate_retirement_projection",
    "get_projection_stats",
    "get_summary_years",
    # Guardrails
    "DEFAULT_GUARDRAILS",
    "GuardrailStatus",
    "GuardrailsAssessment",
    "GuardrailsConfig",
    "GuardrailsResult",
    "calculate_guardrails",
    "get_guardrails_assessment",
]

"""Tax constants: year-specific tables and RMD life-expectancy data."""

from drawdown.tax.rmd_tables import (
    RMD_START_AGE,
    UNIFORM_LIFETIME_TABLE,
    get_distribution_period,
)
from drawdown.tax.year_config import (
    DEFAULT_TAX_YEAR,
    TAX_YEAR_2025,
    TAX_YEAR_2026,
    TAX_YEAR_CONFIGS,
    SocialSecurityThresholds,
    TaxBracket,
    TaxYearConfig,
    get_tax_year_config,
)

__all__ = [
    "TaxBracket",
    "SocialSecurityThresholds",
    "TaxYearConfig",
    "DEFAULT_TAX_YEAR",
    "TAX_YEAR_2025",
    "TAX_YEAR_2026",
    "TAX_YEAR_CONFIGS",
    "get_tax_year_config",
    "RMD_START_AGE",
    "UNIFORM_LIFETIME_TABLE",
    "get_distribution_period",
]

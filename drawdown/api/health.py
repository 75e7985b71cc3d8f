"""Health check endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

from drawdown.core.config import settings
from drawdown.tax.year_config import TAX_YEAR_CONFIGS

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    environment: str
    default_tax_year: int
    available_tax_years: list[int]


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Report service status and which tax tables are loaded."""
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        default_tax_year=settings.default_tax_year,
        available_tax_years=sorted(TAX_YEAR_CONFIGS),
    )

"""API module exports."""

from drawdown.api.calculators import router as calculators_router
from drawdown.api.health import router as health_router
from drawdown.api.plans import router as plans_router

__all__ = [
    "calculators_router",
    "health_router",
    "plans_router",
]

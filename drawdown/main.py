"""FastAPI application entry point with lifespan management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from drawdown.api.calculators import router as calculators_router
from drawdown.api.health import router as health_router
from drawdown.api.middleware import RequestContextMiddleware
from drawdown.api.plans import router as plans_router
from drawdown.core.config import settings
from drawdown.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup; the engine holds no other resources."""
    configure_logging()
    logger.info(
        "Starting application",
        environment=settings.environment,
        default_tax_year=settings.default_tax_year,
    )

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title="Drawdown",
    description="Tax-aware retirement withdrawal planning",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Unknown tax years and filing statuses are client errors."""
    logger.warning("request_value_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health_router)
app.include_router(plans_router)
app.include_router(calculators_router)

"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from portfolio_valuation.api.deps import get_app_context
from portfolio_valuation.api.routers import market_router, portfolio_router
from portfolio_valuation.api.schemas import HealthResponse
from portfolio_valuation.app_context import AppContext
from portfolio_valuation.config.logging_config import setup_logging
from portfolio_valuation.config.settings import get_settings
from portfolio_valuation.core.exceptions import (
    AppError,
    LimiterQueueFullError,
    UpstreamError,
    ValidationError,
)

_STATUS_BY_ERROR: dict[type, int] = {
    ValidationError: 400,
    UpstreamError: 502,
    LimiterQueueFullError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = AppContext(settings=get_settings())
    await context.start()
    app.state.context = context
    yield
    # Shutdown
    await context.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Portfolio valuation with cached, rate-limited market data",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(portfolio_router)
app.include_router(market_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    content = {"error": exc.code, "message": exc.message}
    if isinstance(exc, ValidationError) and exc.index is not None:
        content["index"] = exc.index
    return JSONResponse(
        status_code=_STATUS_BY_ERROR.get(type(exc), 400),
        content=content,
    )


@app.get("/health", response_model=HealthResponse)
def health_check(context: AppContext = Depends(get_app_context)) -> HealthResponse:
    """Health check endpoint with cache and limiter gauges."""
    return HealthResponse(
        status="healthy",
        cache_entries=context.cache.size(),
        upstream_running=context.limiter.running,
        upstream_pending=context.limiter.pending,
    )


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }

"""Core utilities and shared functionality."""

from portfolio_valuation.core.timezone import now_market, MARKET_TZ
from portfolio_valuation.core.exceptions import (
    AppError,
    ValidationError,
    UpstreamError,
    LimiterQueueFullError,
    OperationCancelledError,
)
from portfolio_valuation.core.cache import TTLCache
from portfolio_valuation.core.limits import (
    CancellationToken,
    ConcurrencyLimiter,
    RateLimitedRequester,
    backoff_delay,
    retry_with_backoff,
    respectful_delay,
)

__all__ = [
    "now_market",
    "MARKET_TZ",
    "AppError",
    "ValidationError",
    "UpstreamError",
    "LimiterQueueFullError",
    "OperationCancelledError",
    "TTLCache",
    "CancellationToken",
    "ConcurrencyLimiter",
    "RateLimitedRequester",
    "backoff_delay",
    "retry_with_backoff",
    "respectful_delay",
]

"""Application-level exceptions."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails.

    ``index`` identifies the offending record when a batch is rejected.
    """

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.index = index


class UpstreamError(AppError):
    """Raised when the market data provider fails.

    ``retryable`` tags transient failures (network, throttling, timeouts).
    Permanent failures such as an unknown symbol are tagged False and are
    not retried.
    """

    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message, code="UPSTREAM_ERROR")
        self.retryable = retryable


class LimiterQueueFullError(AppError):
    """Raised when the limiter queue is at its admission cap."""

    def __init__(self, depth: int):
        super().__init__(
            f"Upstream request queue is full ({depth} waiting)",
            code="QUEUE_FULL",
        )
        self.depth = depth


class OperationCancelledError(AppError):
    """Raised when a queued operation is withdrawn before it starts."""

    def __init__(self, message: str = "Operation cancelled before start"):
        super().__init__(message, code="CANCELLED")

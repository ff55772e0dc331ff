"""HTTP middleware: error handling, correlation IDs and rate limiting."""

from hervoice.api.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from hervoice.api.middleware.rate_limiter import RateLimitConfig, RateLimitMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RateLimitConfig",
    "RateLimitMiddleware",
    "register_exception_handlers",
]

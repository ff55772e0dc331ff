"""Metrics infrastructure package."""

from hervoice.infrastructure.metrics.prometheus_metrics import (
    # Auth metrics
    AUTH_OPERATIONS_TOTAL,
    PASSWORD_HASH_DURATION,
    # API metrics
    RATE_LIMIT_EXCEEDED,
    # Helpers
    track_auth_operation,
    observe_hash_duration,
    update_system_info,
    # Router
    metrics_router,
)

__all__ = [
    "AUTH_OPERATIONS_TOTAL",
    "PASSWORD_HASH_DURATION",
    "RATE_LIMIT_EXCEEDED",
    "track_auth_operation",
    "observe_hash_duration",
    "update_system_info",
    "metrics_router",
]

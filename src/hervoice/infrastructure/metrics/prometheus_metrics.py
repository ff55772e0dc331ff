"""
Prometheus Metrics

Production-grade metrics for HerVoice auth observability.
Exposes metrics at /metrics endpoint for Prometheus scraping.

ARCHITECTURE: Metrics are decoupled from business logic.
Only increment/observe; never block on metrics operations.
"""

import time
from functools import wraps
from typing import Callable

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)
from fastapi import APIRouter, Response

from hervoice.domain.errors import AuthError

# =============================================================================
# AUTH METRICS
# =============================================================================

AUTH_OPERATIONS_TOTAL = Counter(
    "hervoice_auth_operations_total",
    "Account operations by outcome",
    ["operation", "outcome"],  # outcome: success or lower-cased error code
)

PASSWORD_HASH_DURATION = Histogram(
    "hervoice_password_hash_seconds",
    "Time spent deriving password keys",
    ["operation"],  # hash, verify
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# =============================================================================
# API METRICS
# =============================================================================

RATE_LIMIT_EXCEEDED = Counter(
    "hervoice_rate_limit_exceeded_total",
    "Rate limit exceeded events",
    ["client_type"],  # standard, credential
)

# =============================================================================
# SYSTEM INFO
# =============================================================================

SYSTEM_INFO = Info(
    "hervoice_system",
    "HerVoice system information",
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def track_auth_operation(operation: str) -> Callable:
    """Decorator to count account operations by outcome."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except AuthError as e:
                AUTH_OPERATIONS_TOTAL.labels(operation=operation, outcome=e.code.lower()).inc()
                raise
            except Exception:
                AUTH_OPERATIONS_TOTAL.labels(operation=operation, outcome="error").inc()
                raise
            AUTH_OPERATIONS_TOTAL.labels(operation=operation, outcome="success").inc()
            return result
        return wrapper
    return decorator


def observe_hash_duration(operation: str, started_at: float) -> None:
    """Record key-derivation latency since ``started_at`` (perf_counter)."""
    PASSWORD_HASH_DURATION.labels(operation=operation).observe(time.perf_counter() - started_at)


def update_system_info(environment: str, version: str = "0.1.0") -> None:
    """Update system info metric with current environment."""
    SYSTEM_INFO.info({
        "version": version,
        "environment": environment,
    })


# =============================================================================
# METRICS ENDPOINT
# =============================================================================

metrics_router = APIRouter(tags=["metrics"])


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format for scraping.
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )

"""
Rate Limiting Middleware

Token bucket rate limiting for API protection.
Credential endpoints (login, signup, reset) get a much tighter
budget than the rest of the API to slow down password guessing.
"""

import asyncio
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from hervoice.config.logging_config import get_logger
from hervoice.config.settings import RateLimitSettings
from hervoice.infrastructure.metrics import RATE_LIMIT_EXCEEDED

logger = get_logger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    # Requests per minute for general API
    requests_per_minute: int = 60

    # Requests per minute for credential endpoints
    credential_requests_per_minute: int = 10

    # Burst allowance (tokens above limit)
    burst_size: int = 10

    # Buckets idle for longer than this are dropped
    idle_seconds: int = 600

    # Peers whose X-Forwarded-For header is believed
    trusted_proxies: frozenset[str] = frozenset()

    @classmethod
    def from_settings(cls, settings: RateLimitSettings) -> "RateLimitConfig":
        return cls(
            requests_per_minute=settings.requests_per_minute,
            credential_requests_per_minute=settings.credential_requests_per_minute,
            burst_size=settings.burst_size,
            trusted_proxies=frozenset(settings.trusted_proxies),
        )


class TokenBucket:
    """Token bucket for rate limiting."""

    def __init__(
        self,
        rate: float,  # Tokens per second
        capacity: int,  # Maximum tokens
    ) -> None:
        self.rate = rate
        self.capacity = capacity
        self.tokens = float(capacity)
        self.last_update = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self, tokens: int = 1) -> bool:
        """
        Attempt to acquire tokens.

        Returns True if tokens acquired, False if rate limited.
        """
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_update

            self.tokens = min(
                self.capacity,
                self.tokens + elapsed * self.rate
            )
            self.last_update = now

            if self.tokens >= tokens:
                self.tokens -= tokens
                return True

            return False

    @property
    def available_tokens(self) -> int:
        """Get current available tokens."""
        return int(self.tokens)


class RateLimiter:
    """
    Rate limiter using token bucket algorithm.

    Maintains separate buckets per client identifier.
    """

    def __init__(self, config: Optional[RateLimitConfig] = None) -> None:
        self.config = config or RateLimitConfig()
        self._buckets: dict[str, TokenBucket] = defaultdict(self._create_bucket)
        self._credential_buckets: dict[str, TokenBucket] = defaultdict(self._create_credential_bucket)
        self._last_cleanup = time.monotonic()

    def _create_bucket(self) -> TokenBucket:
        """Create standard rate limit bucket."""
        rate = self.config.requests_per_minute / 60.0
        capacity = self.config.requests_per_minute + self.config.burst_size
        return TokenBucket(rate=rate, capacity=capacity)

    def _create_credential_bucket(self) -> TokenBucket:
        """Create credential endpoint bucket (no burst allowance)."""
        rate = self.config.credential_requests_per_minute / 60.0
        capacity = self.config.credential_requests_per_minute
        return TokenBucket(rate=rate, capacity=capacity)

    async def check_rate_limit(
        self,
        client_id: str,
        is_credential_endpoint: bool = False,
    ) -> tuple[bool, int]:
        """
        Check if request is within rate limit.

        Returns:
            Tuple of (allowed, remaining_tokens)
        """
        self._maybe_cleanup()

        buckets = self._credential_buckets if is_credential_endpoint else self._buckets
        bucket = buckets[client_id]

        allowed = await bucket.acquire()
        remaining = bucket.available_tokens

        if not allowed:
            client_type = "credential" if is_credential_endpoint else "standard"
            RATE_LIMIT_EXCEEDED.labels(client_type=client_type).inc()
            logger.warning(
                "Rate limit exceeded",
                client_id=client_id[:8] + "...",  # Truncate for privacy
                is_credential=is_credential_endpoint,
            )

        return allowed, remaining

    def _maybe_cleanup(self) -> None:
        now = time.monotonic()
        if now - self._last_cleanup < self.config.idle_seconds / 2:
            return
        self._last_cleanup = now
        self._cleanup_inactive_buckets(now)

    def _cleanup_inactive_buckets(self, now: float) -> None:
        """Remove buckets that haven't been used recently."""
        for buckets in (self._buckets, self._credential_buckets):
            inactive_keys = [
                key for key, bucket in buckets.items()
                if now - bucket.last_update > self.config.idle_seconds
            ]
            for key in inactive_keys:
                del buckets[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for rate limiting.

    Applies a tight limit to credential endpoints and a standard
    limit elsewhere. Never blocks health, metrics or docs.
    """

    EXEMPT_PREFIXES: tuple[str, ...] = (
        "/api/v1/health",
        "/metrics",
        "/docs",
        "/redoc",
        "/openapi.json",
    )

    CREDENTIAL_SUFFIXES: tuple[str, ...] = (
        "/auth/login",
        "/auth/signup",
        "/auth/request-reset",
    )

    def __init__(self, app, config: Optional[RateLimitConfig] = None) -> None:
        super().__init__(app)
        self.limiter = RateLimiter(config)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path

        if path.startswith(self.EXEMPT_PREFIXES):
            return await call_next(request)

        client_id = self._get_client_id(request)
        is_credential = path.rstrip("/").endswith(self.CREDENTIAL_SUFFIXES)

        allowed, remaining = await self.limiter.check_rate_limit(
            client_id,
            is_credential_endpoint=is_credential,
        )

        if not allowed:
            return JSONResponse(
                status_code=429,
                content={
                    "message": "Rate limit exceeded. Please try again later.",
                    "code": "RATE_LIMITED",
                },
                headers={
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": "60",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response

    def _get_client_id(self, request: Request) -> str:
        """
        Get client identifier for rate limiting.

        X-Forwarded-For is only read when the direct peer is a trusted
        proxy; the client is then the rightmost hop that is not itself
        a trusted proxy.
        """
        client_ip = request.client.host if request.client else "unknown"
        trusted = self.limiter.config.trusted_proxies

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded and client_ip in trusted:
            hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
            for hop in reversed(hops):
                client_ip = hop
                if hop not in trusted:
                    break

        return f"ip:{client_ip}"

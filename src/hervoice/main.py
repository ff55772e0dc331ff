"""
HerVoice FastAPI Application Entry Point

Main application initialization with:
- Fail-fast settings loading (no signing secret, no start)
- Lifespan management (startup/shutdown)
- CORS, rate limiting and error handling middleware
- Router registration
- Health and metrics endpoints

This is the production entry point for the HerVoice auth backend.
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hervoice import __version__
from hervoice.config import Settings, get_settings
from hervoice.config.logging_config import configure_logging, get_logger
from hervoice.infrastructure.database import get_db_manager
from hervoice.infrastructure.metrics import metrics_router, update_system_info
from hervoice.infrastructure.monitoring import init_sentry
from hervoice.services.auth import LoggingResetLinkSender, PasswordHasher, TokenCodec
from hervoice.api.v1.router import api_router
from hervoice.api.middleware import (
    ErrorHandlerMiddleware,
    RateLimitConfig,
    RateLimitMiddleware,
    register_exception_handlers,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the database pool on startup; releases it and the
    password hashing pool on shutdown.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Starting HerVoice auth service",
        env=settings.env,
        version=__version__,
    )
    update_system_info(settings.env, __version__)

    db = get_db_manager()
    try:
        await db.initialize(settings.database, echo=settings.debug)
        yield

    finally:
        logger.info("Shutting down HerVoice auth service")
        app.state.password_hasher.shutdown()
        await db.close()
        logger.info("HerVoice auth service shutdown complete")


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Explicit settings; loaded from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)
    init_sentry(
        settings.sentry.dsn.get_secret_value(),
        environment=settings.env,
        release=f"hervoice@{__version__}",
        sample_rate=settings.sentry.sample_rate,
        traces_sample_rate=settings.sentry.traces_sample_rate,
    )

    app = FastAPI(
        title="HerVoice API",
        description="Personal safety companion - account backend",
        version=__version__,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    # Process-wide auth components, built once from configuration
    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(
        iterations=settings.auth.password_hash_iterations,
        max_workers=settings.auth.password_hash_workers,
    )
    app.state.token_codec = TokenCodec(
        settings.auth.token_secret.get_secret_value(),
        default_ttl=timedelta(seconds=settings.auth.token_ttl_seconds),
    )
    app.state.reset_link_sender = LoggingResetLinkSender(include_link=settings.env == "development")

    # Middleware: last added runs first
    if settings.rate_limit.enabled:
        app.add_middleware(
            RateLimitMiddleware,
            config=RateLimitConfig.from_settings(settings.rate_limit),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    app.include_router(
        api_router,
        prefix=f"/api/{settings.api_version}",
    )
    app.include_router(metrics_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint - basic info."""
        return {
            "name": "HerVoice API",
            "version": __version__,
            "status": "operational",
        }

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "hervoice.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.env == "development",
        log_level=settings.log_level.lower(),
    )

"""
Health Check Endpoints

Provides system health and readiness endpoints for:
- Load balancer health checks
- Kubernetes probes
- Monitoring systems
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from hervoice import __version__
from hervoice.infrastructure.database import get_db_manager

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness check response with component health."""

    ready: bool
    components: dict


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Basic health check endpoint for load balancers",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Basic health check.

    Returns 200 if application is running.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=request.app.state.settings.env,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Readiness check including the credential database",
)
async def readiness_check() -> ReadinessResponse:
    """
    Detailed readiness check.

    The service is ready when the credential database is reachable.
    """
    components = {"database": await get_db_manager().health_check()}

    return ReadinessResponse(
        ready=all(components.values()),
        components=components,
    )


@router.get(
    "/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Kubernetes liveness probe endpoint",
)
async def liveness_check(request: Request) -> HealthResponse:
    """
    Kubernetes liveness probe.

    Returns 200 if application process is alive.
    """
    return HealthResponse(
        status="alive",
        version=__version__,
        environment=request.app.state.settings.env,
    )

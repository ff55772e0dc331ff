"""
API v1 Router

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter

from hervoice.api.v1.endpoints.auth import router as auth_router
from hervoice.api.v1.endpoints.health import router as health_router

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    health_router,
    prefix="/health",
    tags=["Health"],
)

api_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["Auth"],
)

# =============================================================================
# API V1 MODULE INITIALIZATION
# =============================================================================
# File: api/v1/__init__.py
# Description: API v1 module exports and router aggregation
# =============================================================================

from fastapi import APIRouter

from miparqueo.api.v1.health_routes import router as health_router
from miparqueo.api.v1.parking_routes import router as parking_router


# Create main API router
api_router = APIRouter(prefix="/api")

# Include sub-routers
api_router.include_router(health_router)
api_router.include_router(parking_router)


__all__ = [
    "api_router",
    "health_router",
    "parking_router",
]

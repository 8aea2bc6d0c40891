# =============================================================================
# MIPARQUEO BACKEND - HEALTH ROUTES
# =============================================================================
# File: api/v1/health_routes.py
# Description: Health check endpoint for monitoring and orchestration
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from miparqueo.api.dependencies import get_gate
from miparqueo.api.v1.schemas import HealthResponse
from miparqueo.db.gate import InitializationGate


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Report process and database-gate status.",
)
async def health_check(
    request: Request,
    gate: InitializationGate = Depends(get_gate),
) -> HealthResponse:
    """
    Health check.

    Reads the gate state only; it never triggers database initialization,
    so load balancer probes stay cheap.
    """
    settings = request.app.state.settings
    return HealthResponse(
        status="ok",
        message="Server running",
        timestamp=datetime.now(timezone.utc),
        environment=settings.app_env,
        db_type=settings.db_type,
        db_initialized=gate.is_ready,
        db_state=gate.state.value,
    )

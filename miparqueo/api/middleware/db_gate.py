# =============================================================================
# MIPARQUEO BACKEND - DATABASE GATE MIDDLEWARE
# =============================================================================
# File: api/middleware/db_gate.py
# Description: Holds API requests until the database is ready
# =============================================================================

from typing import Callable
import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from miparqueo.core.exceptions import ParkingSystemException


logger = logging.getLogger(__name__)


class DatabaseGateMiddleware(BaseHTTPMiddleware):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    DATABASE GATE MIDDLEWARE                              │
    │  Asks the initialization gate for readiness before any API route runs   │
    │  Maps gate failures to 503 Service Unavailable                          │
    └─────────────────────────────────────────────────────────────────────────┘

    The gate lives on ``request.app.state.db_gate``. The first API request
    after startup (or after a failed attempt) triggers construction;
    concurrent requests wait for it.
    """

    API_PREFIX = "/api/"

    # Reports gate status without triggering initialization
    EXEMPT_ENDPOINTS = {
        "/api/health",
    }

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path

        if not path.startswith(self.API_PREFIX) or path in self.EXEMPT_ENDPOINTS:
            return await call_next(request)

        gate = request.app.state.db_gate
        if not gate.is_ready:
            try:
                await gate.get()
            except ParkingSystemException as e:
                logger.error(f"Database unavailable for {request.method} {path}: {e.message}")
                return JSONResponse(
                    status_code=e.status_code,
                    content=e.to_dict(),
                )

        return await call_next(request)

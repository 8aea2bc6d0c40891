# =============================================================================
# MIPARQUEO BACKEND - API DEPENDENCIES
# =============================================================================
# File: api/dependencies.py
# Description: FastAPI dependencies for the initialization gate and Database
# =============================================================================

from fastapi import Request

from miparqueo.db.database import Database
from miparqueo.db.gate import InitializationGate


def get_gate(request: Request) -> InitializationGate:
    """The application's initialization gate."""
    return request.app.state.db_gate


async def get_database(request: Request) -> Database:
    """
    FastAPI dependency for the ready Database.

    Returns immediately once the gate is READY (the gate middleware has
    normally made sure of that already).

    Usage:
        @router.get("/parking")
        async def list_lots(db: Database = Depends(get_database)):
            ...
    """
    return await get_gate(request).get()

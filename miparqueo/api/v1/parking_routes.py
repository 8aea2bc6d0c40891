# =============================================================================
# MIPARQUEO BACKEND - PARKING LOT ROUTES
# =============================================================================
# File: api/v1/parking_routes.py
# Description: CRUD endpoints for parking lots
# =============================================================================

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from miparqueo.api.dependencies import get_database
from miparqueo.api.v1.schemas import (
    MessageResponse,
    ParkingLotCreate,
    ParkingLotUpdate,
)
from miparqueo.core.exceptions import NotFoundError
from miparqueo.db.database import Database


router = APIRouter(prefix="/parking", tags=["Parking"])


@router.get(
    "",
    summary="List parking lots",
)
async def list_parking_lots(
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    """Return every parking lot."""
    return await db.query("SELECT * FROM parking_lots ORDER BY id")


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create parking lot",
)
async def create_parking_lot(
    body: ParkingLotCreate,
    db: Database = Depends(get_database),
) -> MessageResponse:
    """Create a lot with every space available."""
    result = await db.run(
        """
        INSERT INTO parking_lots (name, location, total_spaces, available_spaces, price_per_hour)
        VALUES (?, ?, ?, ?, ?)
        RETURNING id
        """,
        [body.name, body.location, body.total_spaces, body.total_spaces, body.price_per_hour],
    )
    return MessageResponse(message="Parking lot created", id=result.get("id"))


@router.put(
    "/{lot_id}",
    response_model=MessageResponse,
    summary="Update parking lot",
)
async def update_parking_lot(
    lot_id: int,
    body: ParkingLotUpdate,
    db: Database = Depends(get_database),
) -> MessageResponse:
    result = await db.run(
        """
        UPDATE parking_lots
        SET name = ?, location = ?, total_spaces = ?, available_spaces = ?, price_per_hour = ?
        WHERE id = ?
        """,
        [
            body.name,
            body.location,
            body.total_spaces,
            body.available_spaces,
            body.price_per_hour,
            lot_id,
        ],
    )
    if not result.get("changes"):
        raise NotFoundError("Parking lot")
    return MessageResponse(message="Parking lot updated", id=lot_id)


@router.delete(
    "/{lot_id}",
    response_model=MessageResponse,
    summary="Delete parking lot",
)
async def delete_parking_lot(
    lot_id: int,
    db: Database = Depends(get_database),
) -> MessageResponse:
    result = await db.run("DELETE FROM parking_lots WHERE id = ?", [lot_id])
    if not result.get("changes"):
        raise NotFoundError("Parking lot")
    return MessageResponse(message="Parking lot deleted", id=lot_id)

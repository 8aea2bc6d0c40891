# =============================================================================
# MIPARQUEO BACKEND - API SCHEMAS
# =============================================================================
# File: api/v1/schemas.py
# Description: Request/response models for the v1 routes
# =============================================================================

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ParkingLotCreate(BaseModel):
    """Body of ``POST /api/parking``; available spaces start equal to total."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    total_spaces: int = Field(..., alias="totalSpaces", ge=0)
    price_per_hour: float = Field(..., alias="pricePerHour", ge=0)


class ParkingLotUpdate(ParkingLotCreate):
    """Body of ``PUT /api/parking/{id}``."""
    available_spaces: int = Field(..., alias="availableSpaces", ge=0)


class MessageResponse(BaseModel):
    message: str
    id: Optional[int] = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Overall status")
    message: str
    timestamp: datetime = Field(..., description="Check timestamp")
    environment: str = Field(..., description="Environment name")
    db_type: str = Field(..., description="Configured backend")
    db_initialized: bool = Field(..., description="Whether the gate is READY")
    db_state: str = Field(..., description="Current gate state")

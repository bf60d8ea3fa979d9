"""Courier location schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .routing import PositionModel


class GeofenceRequest(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    radius_m: Optional[float] = Field(default=None, ge=0.0)


class GeofenceResponse(BaseModel):
    inside: bool
    radius_m: float


class LocationHistoryResponse(BaseModel):
    current: Optional[PositionModel]
    points: List[PositionModel]
    traveled_distance_km: float

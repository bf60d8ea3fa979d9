"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Position


class PositionModel(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def to_domain(self) -> Position:
        return Position(latitude=self.latitude, longitude=self.longitude)


class RoutingRequest(BaseModel):
    start: Optional[PositionModel] = Field(
        default=None,
        description="Starting position. When omitted, the courier's last known location is used.",
    )
    average_speed_kmh: Optional[float] = Field(default=None, gt=0.0)
    persist: bool = Field(default=True, description="Write the visit order back onto the stored packages.")
    save_outputs: bool = Field(default=False, description="Write summary, CSV and GeoJSON files for this run.")


class RouteStopModel(BaseModel):
    tracking_number: str
    visit_index: int
    latitude: float
    longitude: float
    distance_from_prev_km: float


class RouteSummaryModel(BaseModel):
    total_distance_km: float
    estimated_minutes: int
    stop_count: int
    average_speed_kmh: float


class RoutingResponse(BaseModel):
    start: PositionModel
    summary: RouteSummaryModel
    stops: List[RouteStopModel]
    metadata: dict


class ClusteringRequest(BaseModel):
    radius_km: Optional[float] = Field(default=None, ge=0.0)


class ClusterModel(BaseModel):
    seed: str
    tracking_numbers: List[str]


class ClusteringResponse(BaseModel):
    radius_km: float
    clusters: List[ClusterModel]
    skipped: List[str]

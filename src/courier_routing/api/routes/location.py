"""Courier location endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...config import settings
from ...schemas.location import GeofenceRequest, GeofenceResponse, LocationHistoryResponse
from ...schemas.routing import PositionModel
from ..deps import TrackerDep

router = APIRouter(prefix="/location", tags=["location"])


@router.post("", response_model=PositionModel, status_code=status.HTTP_200_OK)
def record_location(payload: PositionModel, tracker: TrackerDep) -> PositionModel:
    tracker.record(payload.to_domain())
    return payload


@router.get("", response_model=PositionModel, status_code=status.HTTP_200_OK)
def current_location(tracker: TrackerDep) -> PositionModel:
    position = tracker.current_position()
    if position is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Current location is not known")
    return PositionModel(latitude=position.latitude, longitude=position.longitude)


@router.get("/history", response_model=LocationHistoryResponse, status_code=status.HTTP_200_OK)
def location_history(tracker: TrackerDep) -> LocationHistoryResponse:
    current = tracker.current_position()
    return LocationHistoryResponse(
        current=PositionModel(latitude=current.latitude, longitude=current.longitude) if current else None,
        points=[PositionModel(latitude=point.latitude, longitude=point.longitude) for point in tracker.history()],
        traveled_distance_km=tracker.traveled_distance_km(),
    )


@router.post("/geofence", response_model=GeofenceResponse, status_code=status.HTTP_200_OK)
def check_geofence(payload: GeofenceRequest, tracker: TrackerDep) -> GeofenceResponse:
    radius = settings.geofence_radius_m if payload.radius_m is None else payload.radius_m
    return GeofenceResponse(
        inside=tracker.within_geofence(payload.latitude, payload.longitude, radius),
        radius_m=radius,
    )


@router.delete("", status_code=status.HTTP_200_OK)
def reset_location(tracker: TrackerDep) -> dict:
    tracker.reset()
    return {"success": True}

"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Optional

from ...config import settings
from ...models.domain import PackageStatus, Position
from ...persistence.filesystem import FileStorage
from ...persistence.packages import PackageStorage
from ...schemas.routing import (
    ClusterModel,
    ClusteringResponse,
    PositionModel,
    RouteStopModel,
    RouteSummaryModel,
    RoutingRequest,
    RoutingResponse,
)
from ..export.geojson import route_to_geojson
from ..location.tracking import LocationTracker
from ..outputs.routing_formatter import routing_result_to_csv, routing_result_to_json
from .clustering import cluster_targets
from .models import RouteSummary, RoutingResult
from .solver import compute_total_distance, estimate_minutes, optimize_route

logger = logging.getLogger(__name__)


def _resolve_start(payload: RoutingRequest, tracker: LocationTracker) -> Position:
    if payload.start is not None:
        return payload.start.to_domain()
    position = tracker.current_position()
    if position is None:
        raise ValueError("Could not determine the current location.")
    return position


def _to_response(result: RoutingResult) -> RoutingResponse:
    return RoutingResponse(
        start=PositionModel(latitude=result.start.latitude, longitude=result.start.longitude),
        summary=RouteSummaryModel(
            total_distance_km=result.summary.total_distance_km,
            estimated_minutes=result.summary.estimated_minutes,
            stop_count=result.summary.stop_count,
            average_speed_kmh=result.summary.average_speed_kmh,
        ),
        stops=[
            RouteStopModel(
                tracking_number=stop.identifier,
                visit_index=stop.visit_index,
                latitude=stop.latitude,
                longitude=stop.longitude,
                distance_from_prev_km=stop.distance_from_prev_km,
            )
            for stop in result.stops
        ],
        metadata=result.metadata,
    )


def _save_outputs(result: RoutingResult, files: FileStorage) -> str:
    run_dir = files.make_run_directory(prefix="route")
    files.write_json(run_dir / "summary.json", routing_result_to_json(result))
    files.write_csv(run_dir / "stops.csv", routing_result_to_csv(result))
    files.write_json(run_dir / "route.geojson", result.metadata["map_overlays"]["route"])
    return str(run_dir)


def optimize_pending_packages(
    payload: RoutingRequest,
    *,
    storage: PackageStorage,
    tracker: LocationTracker,
    files: Optional[FileStorage] = None,
) -> RoutingResponse:
    """Order the courier's pending packages starting from the current position."""

    start = _resolve_start(payload, tracker)

    pending = storage.filter_by_status(PackageStatus.PENDING)
    if not pending:
        raise ValueError("No pending packages to optimize.")

    targets = [package.to_target() for package in pending]
    skipped = [target.identifier for target in targets if not target.has_coordinates]
    if skipped:
        logger.warning(f"{len(skipped)} pending packages have no coordinates and were left out of the route")

    stops = optimize_route(targets, start)
    if not stops:
        raise ValueError("Route could not be optimized: no pending package has coordinates.")

    speed = payload.average_speed_kmh or settings.average_speed_kmh
    total_distance = compute_total_distance(start, stops)
    summary = RouteSummary(
        total_distance_km=total_distance,
        estimated_minutes=estimate_minutes(total_distance, speed),
        stop_count=len(stops),
        average_speed_kmh=speed,
    )
    result = RoutingResult(
        start=start,
        stops=stops,
        summary=summary,
        metadata={
            "algorithm": "nearest_neighbor",
            "pending_packages": len(pending),
            "skipped": skipped,
        },
    )
    result.metadata["map_overlays"] = {"route": route_to_geojson(result)}
    logger.info(
        f"Optimized route with {summary.stop_count} stops, "
        f"{summary.total_distance_km:.2f} km, ~{summary.estimated_minutes} min"
    )

    if payload.persist:
        updated = storage.update_visit_indices(
            ((stop.identifier, stop.visit_index) for stop in stops), clear_others=True
        )
        result.metadata["persisted"] = updated

    if payload.save_outputs:
        result.metadata["run_directory"] = _save_outputs(result, files or FileStorage())

    return _to_response(result)


def cluster_pending_packages(
    radius_km: Optional[float],
    *,
    storage: PackageStorage,
) -> ClusteringResponse:
    radius = settings.cluster_radius_km if radius_km is None else radius_km
    targets = [package.to_target() for package in storage.filter_by_status(PackageStatus.PENDING)]
    clusters = cluster_targets(targets, radius)
    return ClusteringResponse(
        radius_km=radius,
        clusters=[
            ClusterModel(
                seed=cluster[0].identifier,
                tracking_numbers=[target.identifier for target in cluster],
            )
            for cluster in clusters
        ],
        skipped=[target.identifier for target in targets if not target.has_coordinates],
    )

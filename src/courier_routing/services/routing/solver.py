"""Nearest-neighbour route construction and trip metrics."""

from __future__ import annotations

import math
from typing import Sequence

from ...models.domain import DeliveryTarget, Position
from ..geospatial import haversine_km
from .models import RouteStop

DEFAULT_AVERAGE_SPEED_KMH = 30.0


def _valid_targets(targets: Sequence[DeliveryTarget]) -> list[DeliveryTarget]:
    return [target for target in targets if target.has_coordinates]


def optimize_route(targets: Sequence[DeliveryTarget], start: Position) -> list[RouteStop]:
    """Order targets by repeatedly visiting the closest unvisited one.

    Targets without coordinates are dropped. When two candidates are equally
    close, the one that comes first in ``targets`` wins.
    """

    candidates = _valid_targets(targets)
    if not candidates:
        return []

    visited: set[int] = set()
    stops: list[RouteStop] = []
    current_lat, current_lon = start.latitude, start.longitude

    while len(visited) < len(candidates):
        nearest_idx = -1
        nearest_distance = math.inf
        for idx, target in enumerate(candidates):
            if idx in visited:
                continue
            distance = haversine_km(current_lat, current_lon, target.latitude, target.longitude)
            if distance < nearest_distance:
                nearest_distance = distance
                nearest_idx = idx

        target = candidates[nearest_idx]
        visited.add(nearest_idx)
        stops.append(
            RouteStop(
                identifier=target.identifier,
                visit_index=len(stops) + 1,
                latitude=target.latitude,
                longitude=target.longitude,
                distance_from_prev_km=nearest_distance,
            )
        )
        current_lat, current_lon = target.latitude, target.longitude

    return stops


def compute_total_distance(start: Position, stops: Sequence[RouteStop]) -> float:
    """Sum of leg distances from ``start`` through every stop in order."""

    total = 0.0
    prev_lat, prev_lon = start.latitude, start.longitude
    for stop in stops:
        total += haversine_km(prev_lat, prev_lon, stop.latitude, stop.longitude)
        prev_lat, prev_lon = stop.latitude, stop.longitude
    return total


def estimate_minutes(total_distance_km: float, average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> int:
    """Travel time in whole minutes, rounded up."""

    if average_speed_kmh <= 0:
        raise ValueError(f"Average speed must be positive, got {average_speed_kmh}.")
    return math.ceil(total_distance_km / average_speed_kmh * 60)

"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ...models.domain import Position


@dataclass(slots=True)
class RouteStop:
    identifier: str
    visit_index: int
    latitude: float
    longitude: float
    distance_from_prev_km: float = 0.0


@dataclass(slots=True)
class RouteSummary:
    total_distance_km: float
    estimated_minutes: int
    stop_count: int
    average_speed_kmh: float


@dataclass(slots=True)
class RoutingResult:
    start: Position
    stops: List[RouteStop]
    summary: RouteSummary
    metadata: dict = field(default_factory=dict)

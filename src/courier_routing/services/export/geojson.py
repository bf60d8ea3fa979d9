"""GeoJSON export of optimized routes."""

from __future__ import annotations

from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ..routing.models import RoutingResult

ROUTE_COLOR = "#0a7ea4"
START_COLOR = "#e0003e"


def _feature(geometry, properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": mapping(geometry),
        "properties": properties,
    }


def route_to_geojson(result: RoutingResult) -> Dict[str, Any]:
    """Build a FeatureCollection with the start point, each stop and the route line.

    Coordinates follow GeoJSON (longitude, latitude) order.
    """

    start = result.start
    features: List[Dict[str, Any]] = [
        _feature(
            Point(start.longitude, start.latitude),
            {"kind": "start", "color": START_COLOR},
        )
    ]
    for stop in result.stops:
        features.append(
            _feature(
                Point(stop.longitude, stop.latitude),
                {
                    "kind": "stop",
                    "tracking_number": stop.identifier,
                    "visit_index": stop.visit_index,
                    "distance_from_prev_km": stop.distance_from_prev_km,
                },
            )
        )

    # A line needs at least two vertices: the start plus one stop
    if result.stops:
        path = [(start.longitude, start.latitude)] + [(stop.longitude, stop.latitude) for stop in result.stops]
        features.append(
            _feature(
                LineString(path),
                {
                    "kind": "route",
                    "color": ROUTE_COLOR,
                    "total_distance_km": result.summary.total_distance_km,
                    "estimated_minutes": result.summary.estimated_minutes,
                },
            )
        )

    return {"type": "FeatureCollection", "features": features}

"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ..routing.models import RoutingResult


def routing_result_to_json(result: RoutingResult) -> dict:
    return {
        "start": asdict(result.start),
        "summary": asdict(result.summary),
        "metadata": result.metadata,
        "stops": [asdict(stop) for stop in result.stops],
    }


def routing_result_to_csv(result: RoutingResult) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "visit_index",
        "tracking_number",
        "latitude",
        "longitude",
        "distance_from_prev_km",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in result.stops:
        writer.writerow(
            {
                "visit_index": stop.visit_index,
                "tracking_number": stop.identifier,
                "latitude": stop.latitude,
                "longitude": stop.longitude,
                "distance_from_prev_km": round(stop.distance_from_prev_km, 4),
            }
        )
    return buffer.getvalue()

"""Courier position tracking."""

from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from ...config import settings
from ...models.domain import Position
from ...persistence.filesystem import FileStorage
from ..geospatial import haversine_km, within_radius_m

logger = logging.getLogger(__name__)

LAST_LOCATION_FILE = "last_location.json"


class LocationTracker:
    """Keeps the courier's current position and a bounded trail of past ones.

    The latest position is also written to disk so it survives a restart.
    """

    def __init__(self, storage: FileStorage | None = None, history_limit: int | None = None) -> None:
        self.storage = storage or FileStorage()
        self.path = self.storage.root / LAST_LOCATION_FILE
        self._history: deque[Position] = deque(maxlen=history_limit or settings.location_history_limit)
        self._current: Optional[Position] = None
        self._lock = threading.Lock()

    def record(self, position: Position) -> Position:
        with self._lock:
            self._current = position
            self._history.append(position)
            self.storage.write_json(
                self.path,
                {
                    "latitude": position.latitude,
                    "longitude": position.longitude,
                    "recorded_at": datetime.now(timezone.utc).isoformat(),
                },
            )
        return position

    def current_position(self) -> Optional[Position]:
        """Return the last known position, or None if the courier was never located."""

        if self._current is not None:
            return self._current
        try:
            data = self.storage.read_json(self.path)
        except ValueError as exc:
            logger.warning(f"Ignoring unreadable last location file: {exc}")
            return None
        if not data:
            return None
        try:
            return Position(latitude=float(data["latitude"]), longitude=float(data["longitude"]))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Ignoring malformed last location record: {data!r}")
            return None

    def history(self) -> list[Position]:
        return list(self._history)

    def traveled_distance_km(self) -> float:
        points = self.history()
        if len(points) < 2:
            return 0.0
        return sum(
            haversine_km(prev.latitude, prev.longitude, point.latitude, point.longitude)
            for prev, point in zip(points, points[1:])
        )

    def within_geofence(self, latitude: float, longitude: float, radius_m: float | None = None) -> bool:
        current = self.current_position()
        if current is None:
            return False
        radius = settings.geofence_radius_m if radius_m is None else radius_m
        return within_radius_m(current.latitude, current.longitude, latitude, longitude, radius)

    def reset(self) -> None:
        with self._lock:
            self._current = None
            self._history.clear()
            self.storage.remove(self.path)

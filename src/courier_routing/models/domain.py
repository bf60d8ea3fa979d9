"""Domain models for packages, positions and delivery targets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PackageStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"


@dataclass(slots=True, frozen=True)
class Position:
    """A (latitude, longitude) pair in degrees."""

    latitude: float
    longitude: float


@dataclass(slots=True, frozen=True)
class DeliveryTarget:
    """A package location eligible for route ordering.

    Coordinates are optional; targets without both of them are left out of
    optimization and clustering.
    """

    identifier: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(slots=True)
class Package:
    """A package carried by the courier, keyed by tracking number."""

    tracking_number: str
    address: str
    status: PackageStatus = PackageStatus.PENDING
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    visit_index: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_target(self) -> DeliveryTarget:
        return DeliveryTarget(
            identifier=self.tracking_number,
            latitude=self.latitude,
            longitude=self.longitude,
        )

"""Package request/response and storage schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ..models.domain import Package, PackageStatus


class PackageRecord(BaseModel):
    """Validated package record, used both on disk and over the API.

    Records written by the mobile client use camelCase keys (``trackingNumber``,
    ``lat``/``lng``, ``order``, epoch-millisecond timestamps); those are accepted
    on input as well.
    """

    tracking_number: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("tracking_number", "trackingNumber")
    )
    address: str = ""
    status: PackageStatus = PackageStatus.PENDING
    latitude: Optional[float] = Field(
        default=None, ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat")
    )
    longitude: Optional[float] = Field(
        default=None, ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lng")
    )
    visit_index: Optional[int] = Field(
        default=None, ge=1, validation_alias=AliasChoices("visit_index", "order")
    )
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )

    @classmethod
    def from_domain(cls, package: Package) -> "PackageRecord":
        return cls(
            tracking_number=package.tracking_number,
            address=package.address,
            status=package.status,
            latitude=package.latitude,
            longitude=package.longitude,
            visit_index=package.visit_index,
            created_at=package.created_at,
            updated_at=package.updated_at,
        )

    def to_domain(self) -> Package:
        return Package(
            tracking_number=self.tracking_number,
            address=self.address,
            status=self.status,
            latitude=self.latitude,
            longitude=self.longitude,
            visit_index=self.visit_index,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class PackageCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    tracking_number: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    geocode: bool = Field(
        default=True,
        description="Look up coordinates from the address when none are supplied.",
    )

    @model_validator(mode="after")
    def _coordinates_come_in_pairs(self) -> "PackageCreate":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together.")
        return self


class PackageStatusUpdate(BaseModel):
    status: PackageStatus


class PackageStatsModel(BaseModel):
    total: int
    delivered: int
    pending: int


class PackageListResponse(BaseModel):
    count: int
    packages: List[PackageRecord]

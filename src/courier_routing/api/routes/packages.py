"""Package management endpoints."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status

from ...models.domain import Package, PackageStatus
from ...schemas.packages import (
    PackageCreate,
    PackageListResponse,
    PackageRecord,
    PackageStatsModel,
    PackageStatusUpdate,
)
from ...services.packages import compute_package_stats
from ..deps import GeocoderDep, StorageDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/packages", tags=["packages"])


def _list_response(packages: list[Package]) -> PackageListResponse:
    return PackageListResponse(
        count=len(packages),
        packages=[PackageRecord.from_domain(package) for package in packages],
    )


@router.get("", response_model=PackageListResponse, status_code=status.HTTP_200_OK)
def list_packages(
    storage: StorageDep,
    status_filter: Literal["all", "pending", "delivered"] = Query(default="all", alias="status"),
    q: Optional[str] = Query(default=None, description="Search tracking number or address"),
) -> PackageListResponse:
    try:
        packages = storage.filter_by_status(status_filter)
        if q:
            matches = {package.tracking_number for package in storage.search(q)}
            packages = [package for package in packages if package.tracking_number in matches]
        return _list_response(packages)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


@router.post("", response_model=PackageRecord, status_code=status.HTTP_201_CREATED)
def add_package(payload: PackageCreate, storage: StorageDep, geocoder: GeocoderDep) -> PackageRecord:
    """Add a package, geocoding its address when no coordinates are given."""
    tracking_number = payload.tracking_number
    if storage.get_package(tracking_number) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Package {tracking_number} already exists",
        )

    latitude, longitude = payload.latitude, payload.longitude
    address = payload.address
    if latitude is None and payload.geocode:
        try:
            location = geocoder.geocode(payload.address)
        except ConnectionError as exc:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        if location is None:
            logger.warning(f"Address for package {tracking_number} could not be geocoded")
        else:
            latitude, longitude, address = location.latitude, location.longitude, location.address

    stored = storage.save_package(
        Package(
            tracking_number=tracking_number,
            address=address,
            status=PackageStatus.PENDING,
            latitude=latitude,
            longitude=longitude,
        )
    )
    return PackageRecord.from_domain(stored)


@router.delete("", status_code=status.HTTP_200_OK)
def clear_packages(storage: StorageDep) -> dict:
    storage.clear()
    return {"success": True}


@router.get("/stats", response_model=PackageStatsModel, status_code=status.HTTP_200_OK)
def package_stats(storage: StorageDep) -> PackageStatsModel:
    return PackageStatsModel(**compute_package_stats(storage.list_packages()))


@router.get("/by-order", response_model=PackageListResponse, status_code=status.HTTP_200_OK)
def packages_by_order(storage: StorageDep) -> PackageListResponse:
    return _list_response(storage.packages_by_order())


@router.get("/{tracking_number}", response_model=PackageRecord, status_code=status.HTTP_200_OK)
def get_package(tracking_number: str, storage: StorageDep) -> PackageRecord:
    package = storage.get_package(tracking_number)
    if package is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Package {tracking_number} not found")
    return PackageRecord.from_domain(package)


@router.patch("/{tracking_number}/status", response_model=PackageRecord, status_code=status.HTTP_200_OK)
def update_package_status(tracking_number: str, payload: PackageStatusUpdate, storage: StorageDep) -> PackageRecord:
    package = storage.update_status(tracking_number, payload.status)
    if package is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Package {tracking_number} not found")
    return PackageRecord.from_domain(package)


@router.delete("/{tracking_number}", status_code=status.HTTP_200_OK)
def delete_package(tracking_number: str, storage: StorageDep) -> dict:
    if not storage.delete_package(tracking_number):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Package {tracking_number} not found")
    return {"success": True, "message": f"Package {tracking_number} deleted"}

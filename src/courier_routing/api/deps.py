"""Request dependencies resolving the collaborators attached to the application."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from ..persistence.filesystem import FileStorage
from ..persistence.packages import PackageStorage
from ..services.location.geocoding import GeocodingClient
from ..services.location.tracking import LocationTracker


def get_package_storage(request: Request) -> PackageStorage:
    return request.app.state.package_storage


def get_location_tracker(request: Request) -> LocationTracker:
    return request.app.state.location_tracker


def get_geocoder(request: Request) -> GeocodingClient:
    return request.app.state.geocoder


def get_file_storage(request: Request) -> FileStorage:
    return request.app.state.file_storage


StorageDep = Annotated[PackageStorage, Depends(get_package_storage)]
TrackerDep = Annotated[LocationTracker, Depends(get_location_tracker)]
GeocoderDep = Annotated[GeocodingClient, Depends(get_geocoder)]
FilesDep = Annotated[FileStorage, Depends(get_file_storage)]

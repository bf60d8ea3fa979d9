"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ..deps import GeocoderDep, StorageDep

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder(geocoder: GeocoderDep) -> dict:
    """Check geocoding service configuration and reachability."""
    if not geocoder.configured:
        return {
            "service": "geocoder",
            "configured": False,
            "healthy": False,
            "message": "Geocoder API key not configured. Set COURIER_GEOCODER_API_KEY; fallback coordinates are in use.",
        }
    try:
        return {"service": "geocoder", "configured": True, "healthy": geocoder.check_health()}
    except Exception as e:
        return {"service": "geocoder", "configured": True, "healthy": False, "error": str(e)}


@router.get("/health/storage", status_code=status.HTTP_200_OK)
def health_storage(storage: StorageDep) -> dict:
    """Check that the package store can be read."""
    try:
        packages = storage.list_packages()
    except ValueError as exc:
        return {"path": str(storage.path), "readable": False, "error": str(exc)}
    return {"path": str(storage.path), "readable": True, "packages_count": len(packages)}

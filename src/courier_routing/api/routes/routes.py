"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import ClusteringRequest, ClusteringResponse, RoutingRequest, RoutingResponse
from ...services.routing.service import cluster_pending_packages, optimize_pending_packages
from ..deps import FilesDep, StorageDep, TrackerDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=RoutingResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RoutingRequest, storage: StorageDep, tracker: TrackerDep, files: FilesDep) -> RoutingResponse:
    try:
        return optimize_pending_packages(payload, storage=storage, tracker=tracker, files=files)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc


@router.post("/clusters", response_model=ClusteringResponse, status_code=status.HTTP_200_OK)
def clusters(payload: ClusteringRequest, storage: StorageDep) -> ClusteringResponse:
    try:
        return cluster_pending_packages(payload.radius_km, storage=storage)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error clustering packages: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to cluster packages: {str(exc)}",
        ) from exc

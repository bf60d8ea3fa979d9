"""FastAPI application entry point."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, location, packages, routes
from .config import settings
from .persistence.filesystem import FileStorage
from .persistence.packages import PackageStorage
from .services.location.geocoding import GeocodingClient
from .services.location.tracking import LocationTracker

logger = logging.getLogger(__name__)


def create_app(data_root: Path | None = None, geocoder: GeocodingClient | None = None) -> FastAPI:
    app = FastAPI(title=settings.app_name, root_path="")
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    files = FileStorage(root=data_root)
    app.state.file_storage = files
    app.state.package_storage = PackageStorage(
        path=(data_root / "packages.json") if data_root else None,
        files=files,
    )
    app.state.location_tracker = LocationTracker(storage=files)
    app.state.geocoder = geocoder or GeocodingClient()
    logger.info(f"Package store at {app.state.package_storage.path}")

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(packages.router, prefix=settings.api_prefix)
    app.include_router(location.router, prefix=settings.api_prefix)
    app.include_router(routes.router, prefix=settings.api_prefix)
    return app


app = create_app()

"""Route group exports."""

from . import health, location, packages, routes

__all__ = ["health", "location", "packages", "routes"]

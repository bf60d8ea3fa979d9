"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="COURIER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Courier Route Planner API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for stored packages and outputs.")
    package_store_file: Optional[Path] = Field(
        default=None,
        description="JSON file holding the courier's packages (defaults to <data_root>/packages.json).",
    )
    average_speed_kmh: float = Field(default=30.0, gt=0.0, description="Assumed urban travel speed.")
    cluster_radius_km: float = Field(default=2.0, ge=0.0)
    geofence_radius_m: float = Field(default=100.0, ge=0.0)
    location_history_limit: int = Field(default=100, ge=1)
    geocoder_base_url: str = Field(
        default="https://api.neshan.org",
        description="Base URL of the Neshan geocoding service.",
    )
    geocoder_api_key: Optional[str] = Field(
        default=None,
        description="Api-Key header for the geocoding service. Without it, fallback coordinates are used.",
    )
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoder_max_retries: int = Field(default=3, ge=0)
    geocoder_backoff_seconds: float = Field(default=1.0, ge=0.0)
    fallback_latitude: float = Field(default=35.6892, ge=-90.0, le=90.0)
    fallback_longitude: float = Field(default=51.389, ge=-180.0, le=180.0)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:8081",
            "http://127.0.0.1:8081",
            "http://localhost:19006",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", "package_store_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any, info: ValidationInfo) -> Optional[Path]:
        if value is None:
            return None
        if value == "":
            # An empty store file falls back to <data_root>/packages.json
            return None if info.field_name == "package_store_file" else Path("data").resolve()
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @property
    def package_store_path(self) -> Path:
        return self.package_store_file or (self.data_root / "packages.json")


settings = Settings()

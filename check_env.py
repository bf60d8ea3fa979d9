#!/usr/bin/env python3
"""Helper script to check and create the .env file for the courier routing service."""

from pathlib import Path
import os

ENV_TEMPLATE = """# API Configuration
COURIER_API_PREFIX=/api
# COURIER_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list

# Data Paths
COURIER_DATA_ROOT=./data
# COURIER_PACKAGE_STORE_FILE=./data/packages.json

# Routing
COURIER_AVERAGE_SPEED_KMH=30
COURIER_CLUSTER_RADIUS_KM=2
COURIER_GEOFENCE_RADIUS_M=100

# Geocoding (Neshan). Without a key, packages get the fallback coordinates.
COURIER_GEOCODER_BASE_URL=https://api.neshan.org
COURIER_GEOCODER_API_KEY=
"""


def _mask(value: str) -> str:
    return value[:6] + "..." + value[-4:] if len(value) > 12 else value


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Courier Routing Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"No .env file found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and add COURIER_GEOCODER_API_KEY to enable real geocoding.")
        return

    print(f"Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        if line.startswith("COURIER_GEOCODER_API_KEY=") and line.split("=", 1)[1].strip():
            print(f"COURIER_GEOCODER_API_KEY={_mask(line.split('=', 1)[1].strip())}")
        else:
            print(line)
    print("-" * 60)
    print()

    try:
        import sys
        sys.path.insert(0, str(project_root / "src"))
        from courier_routing.config import settings
    except Exception as e:
        print(f"Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return

    print(f"Data root:      {settings.data_root}")
    print(f"Package store:  {settings.package_store_path}")
    print(f"Average speed:  {settings.average_speed_kmh} km/h")
    if settings.geocoder_api_key:
        print(f"Geocoder key:   {_mask(settings.geocoder_api_key)} (from {'environment' if os.getenv('COURIER_GEOCODER_API_KEY') else '.env'})")
    else:
        print("Geocoder key:   not set, fallback coordinates will be used")


if __name__ == "__main__":
    main()

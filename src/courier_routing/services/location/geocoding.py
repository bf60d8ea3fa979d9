"""HTTP client for the Neshan geocoding service."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from ...config import settings

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(r"[(),.\-]")


@dataclass(slots=True)
class GeocodedLocation:
    latitude: float
    longitude: float
    address: str


def normalize_address(text: str) -> str:
    """Collapse whitespace, blank out ``( ) , . -`` and trim."""

    address = _WHITESPACE_RE.sub(" ", text)
    address = _PUNCTUATION_RE.sub(" ", address)
    return address.strip()


class GeocodingClient:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.geocoder_api_key
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoder_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.geocoder_backoff_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"Api-Key": self.api_key or ""},
            transport=self._transport,
        )

    def _get(self, path: str, params: dict) -> dict:
        attempt = 0
        with self._client() as client:
            while True:
                try:
                    response = client.get(path, params=params)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    # Client errors will not improve on retry
                    if e.response.status_code < 500:
                        raise ValueError(
                            f"Geocoding request rejected with status {e.response.status_code}: {e.response.text}"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Geocoding request failed after {self.max_retries} retries: {e}")
                        raise ConnectionError(f"Geocoding service unreachable at {self.base_url}: {e}") from e
                    wait_time = self.backoff_seconds * attempt
                    logger.debug(f"Geocoding request failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)

    def geocode(self, address: str) -> Optional[GeocodedLocation]:
        """Resolve an address to coordinates.

        Without an API key the configured fallback coordinates are returned so
        packages can still be added during development.
        """

        normalized = normalize_address(address)
        if not self.configured:
            logger.warning("Geocoder API key not configured, using fallback coordinates")
            return GeocodedLocation(
                latitude=settings.fallback_latitude,
                longitude=settings.fallback_longitude,
                address=normalized,
            )

        data = self._get("/v4/geocoding", {"address": normalized})
        location = data.get("location") if isinstance(data, dict) else None
        if not isinstance(location, dict) or location.get("x") is None or location.get("y") is None:
            logger.info(f"No geocoding match for address '{normalized}'")
            return None
        return GeocodedLocation(
            latitude=float(location["y"]),
            longitude=float(location["x"]),
            address=normalized,
        )

    def reverse_geocode(self, latitude: float, longitude: float) -> Optional[str]:
        if not self.configured:
            return None
        data = self._get("/v5/reverse", {"lat": latitude, "lng": longitude})
        if not isinstance(data, dict):
            return None
        address = data.get("formatted_address")
        return address.strip() if address else None

    def check_health(self) -> bool:
        if not self.configured:
            return False
        try:
            with self._client() as client:
                response = client.get("/")
            return response.status_code < 500
        except httpx.HTTPError as exc:
            logger.warning(f"Geocoder health check failed: {exc}")
            return False

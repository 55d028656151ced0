"""Async client for the edge location API."""

from __future__ import annotations

import math
import time
from collections.abc import Mapping
from typing import Any, Final

import httpx

DEFAULT_TIMEOUT: Final[float] = 5.0
DEFAULT_CACHE_TTL: Final[float] = 300.0
EARTH_RADIUS_KM: Final[float] = 6371.0

_monotonic = time.monotonic

EU_COUNTRIES: Final[frozenset[str]] = frozenset(
    {
        "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR",
        "DE", "GR", "HU", "IE", "IT", "LV", "LT", "LU", "MT", "NL",
        "PL", "PT", "RO", "SK", "SI", "ES", "SE",
    }
)


def _location_path(enhanced: bool) -> str:
    return "/location-enhanced" if enhanced else "/location"


class LocationClientError(Exception):
    """Raised when the location service cannot be reached or fails."""


class LocationClient:
    """Fetch location records, caching each route for ``cache_ttl`` seconds.

    Pass ``http_client`` to reuse an existing ``httpx.AsyncClient``; it is
    left open by :meth:`aclose`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        cache: bool = True,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache = cache
        self.cache_ttl = cache_ttl
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._cached: dict[str, tuple[float, dict[str, Any]]] = {}

    async def __aenter__(self) -> LocationClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _get_json(self, path: str, timeout_message: str) -> dict[str, Any]:
        try:
            response = await self._http.get(f"{self.base_url}{path}", timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise LocationClientError(timeout_message) from exc
        except httpx.HTTPError as exc:
            raise LocationClientError(str(exc)) from exc
        if response.is_error:
            raise LocationClientError(
                f"HTTP {response.status_code}: {response.reason_phrase}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise LocationClientError("Invalid JSON in location response") from exc

    def cached_location(self, *, enhanced: bool = False) -> dict[str, Any] | None:
        """Return the cached record if it is younger than ``cache_ttl``."""

        path = _location_path(enhanced)
        entry = self._cached.get(path)
        if entry is None:
            return None
        cached_at, location = entry
        if _monotonic() - cached_at > self.cache_ttl:
            del self._cached[path]
            return None
        return location

    def clear_cache(self) -> None:
        self._cached.clear()

    async def get_location(self, *, fresh: bool = False, enhanced: bool = False) -> dict[str, Any]:
        """Return the caller's location record, from cache unless ``fresh``.

        Plain and enhanced records are cached separately.
        """

        if self.cache and not fresh:
            cached = self.cached_location(enhanced=enhanced)
            if cached is not None:
                return cached

        path = _location_path(enhanced)
        location = await self._get_json(path, "Request timeout")
        if self.cache:
            self._cached[path] = (_monotonic(), location)
        return location

    async def get_health(self) -> dict[str, Any]:
        return await self._get_json("/health", "Health check timeout")

    @staticmethod
    def format_location(location: Mapping[str, Any]) -> str:
        """Join city, region and country into a display string."""

        parts = [
            str(location[key])
            for key in ("city", "region", "country")
            if location.get(key)
        ]
        return ", ".join(parts) or "Unknown Location"

    @staticmethod
    def is_eu(location: Mapping[str, Any]) -> bool:
        return location.get("country") in EU_COUNTRIES

    @staticmethod
    def get_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Great-circle distance in kilometres (haversine)."""

        d_lat = math.radians(lat2 - lat1)
        d_lon = math.radians(lon2 - lon1)
        a = (
            math.sin(d_lat / 2) ** 2
            + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
        )
        return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

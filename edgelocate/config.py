"""Environment-driven configuration for the location service."""

from __future__ import annotations

import os
from typing import Final

from . import __version__


def _get_env(name: str, *, default: str | None = None, required: bool = False) -> str | None:
    value = os.getenv(name)
    if value is None:
        if required:
            raise RuntimeError(f"Missing required environment variable: {name}")
        return default
    return value.strip()


def _get_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


SERVICE_NAME: Final[str] = _get_env("SERVICE_NAME", default="edge-location-api") or "edge-location-api"

# Per-IP lookup used when the edge headers carry too little location data.
LOCATION_FALLBACK_URL: Final[str] = (
    _get_env("LOCATION_FALLBACK_URL", default="https://ipapi.co/{ip}/json/")
    or "https://ipapi.co/{ip}/json/"
)
if "{ip}" not in LOCATION_FALLBACK_URL:
    raise RuntimeError("LOCATION_FALLBACK_URL must contain an {ip} placeholder")
try:
    LOCATION_FALLBACK_URL.format(ip="0.0.0.0")
except (IndexError, KeyError, ValueError) as exc:
    raise RuntimeError(
        f"LOCATION_FALLBACK_URL must only use the {{ip}} placeholder, got {LOCATION_FALLBACK_URL!r}"
    ) from exc

LOCATION_FALLBACK_SOURCE: Final[str] = (
    _get_env("LOCATION_FALLBACK_SOURCE", default="ipapi.co") or "ipapi.co"
)

LOCATION_FALLBACK_TIMEOUT: Final[float] = _get_float("LOCATION_FALLBACK_TIMEOUT", 5.0)
if LOCATION_FALLBACK_TIMEOUT <= 0:
    raise RuntimeError("LOCATION_FALLBACK_TIMEOUT must be greater than zero")

LOCATION_FALLBACK_USER_AGENT: Final[str] = (
    _get_env("LOCATION_FALLBACK_USER_AGENT") or f"{SERVICE_NAME}/{__version__}"
)


def _read_header(name: str, default: str) -> str | None:
    """Fetch an environment override for a CORS header."""

    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or None


DEFAULT_CORS_ALLOW_ORIGIN = "*"
DEFAULT_CORS_ALLOW_METHODS = "GET, POST, OPTIONS"
DEFAULT_CORS_ALLOW_HEADERS = "Content-Type, Authorization"
DEFAULT_CORS_MAX_AGE = "86400"

_CORS_SETTINGS = {
    "Access-Control-Allow-Origin": ("CORS_ALLOW_ORIGIN", DEFAULT_CORS_ALLOW_ORIGIN),
    "Access-Control-Allow-Methods": ("CORS_ALLOW_METHODS", DEFAULT_CORS_ALLOW_METHODS),
    "Access-Control-Allow-Headers": ("CORS_ALLOW_HEADERS", DEFAULT_CORS_ALLOW_HEADERS),
    "Access-Control-Max-Age": ("CORS_MAX_AGE", DEFAULT_CORS_MAX_AGE),
}

# An empty override drops the header entirely.
CORS_HEADERS: dict[str, str] = {}
for _header, (_env_name, _default) in _CORS_SETTINGS.items():
    _value = _read_header(_env_name, _default)
    if _value:
        CORS_HEADERS[_header] = _value

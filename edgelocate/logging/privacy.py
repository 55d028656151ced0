"""Utilities for removing sensitive data from log records."""

from __future__ import annotations

import re
from typing import Any

SENSITIVE_KEYWORDS = {
    "authorization",
    "cookie",
    "password",
    "secret",
    "token",
    "apikey",
    "api_key",
    "x-api-key",
    "proxy-authorization",
}
TOKEN_KEYWORDS = {"token", "authorization", "apikey", "api_key", "x-api-key"}
MASKED_VALUE = "<redacted>"
MAX_FIELD_LENGTH = 1024

GEO_LAT_KEY_PATTERN = re.compile(r"(?:^|_)(lat|latitude)(?:$|_)")
GEO_LON_KEY_PATTERN = re.compile(r"(?:^|_)(lon|longitude)(?:$|_)")
GEO_PAIR_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def _mask_token(value: str) -> str:
    value = value.strip()
    if not value:
        return MASKED_VALUE
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}…{value[-4:]}"


def _normalize_key(key: str) -> str:
    """Return a snake_case lower representation of ``key`` for comparisons."""

    snake = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", key)
    snake = re.sub(r"[^a-zA-Z0-9]+", "_", snake)
    return snake.strip("_").lower()


def _round_coordinate(value: float) -> float:
    rounded = round(value, 1)
    return 0.0 if rounded == 0 else rounded


def coarsen_coordinate(value: Any, minimum: float, maximum: float) -> Any:
    """Round an in-range coordinate to one decimal (roughly 10 km)."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        numeric = float(value)
        if minimum <= numeric <= maximum:
            return _round_coordinate(numeric)
        return value
    if isinstance(value, str):
        try:
            numeric = float(value.strip())
        except ValueError:
            return value
        if minimum <= numeric <= maximum:
            return f"{_round_coordinate(numeric):.1f}"
    return value


def _coarsen_lat_lon_string(value: str) -> str:
    match = GEO_PAIR_PATTERN.match(value)
    if not match:
        return value
    lat = float(match.group(1))
    lon = float(match.group(2))
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return value
    return f"{_round_coordinate(lat):.1f},{_round_coordinate(lon):.1f}"


def _apply_geolocation_policy(key: str | None, value: Any) -> Any:
    if key is not None:
        normalized = _normalize_key(key)
        if GEO_LAT_KEY_PATTERN.search(normalized):
            return coarsen_coordinate(value, -90.0, 90.0)
        if GEO_LON_KEY_PATTERN.search(normalized):
            return coarsen_coordinate(value, -180.0, 180.0)
    if isinstance(value, str):
        return _coarsen_lat_lon_string(value)
    return value


def sanitize_value(key: Any, value: Any) -> Any:
    """Redact secrets, coarsen coordinates and limit field size."""

    if isinstance(key, bytes):
        key_text = key.decode("utf-8", "ignore")
    elif isinstance(key, str):
        key_text = key
    else:
        key_text = None
    lowered = key_text.lower() if key_text is not None else ""
    value = _apply_geolocation_policy(key_text, value)
    if isinstance(value, str):
        if any(keyword in lowered for keyword in SENSITIVE_KEYWORDS):
            if any(keyword in lowered for keyword in TOKEN_KEYWORDS):
                return _mask_token(value)
            return MASKED_VALUE
        if len(value) > MAX_FIELD_LENGTH:
            return value[:MAX_FIELD_LENGTH] + "…[truncated]"
        return value
    if isinstance(value, dict):
        return {k: sanitize_value(k, v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        sanitized = [sanitize_value(key, item) for item in value]
        return tuple(sanitized) if isinstance(value, tuple) else sanitized
    return value

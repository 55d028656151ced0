"""Fill gaps in low-quality location records from an IP lookup service."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Final
from urllib.parse import quote

import httpx

from .. import config
from ..metrics import increment_fallback_requests
from ..schemas import FallbackRecord, LocationRecord
from .quality import score_record

logger = logging.getLogger("edgelocate.location.enhancement")

ESCALATION_LEVELS: Final[frozenset[str]] = frozenset({"minimal", "limited"})

# Record attributes that a fallback lookup may fill in.
MERGEABLE_FIELDS: Final[tuple[str, ...]] = (
    "city",
    "region",
    "latitude",
    "longitude",
    "timezone",
    "postal_code",
)


def needs_enhancement(record: LocationRecord) -> bool:
    """Return True when the edge headers were too sparse to trust alone."""

    return record.data_quality.level in ESCALATION_LEVELS


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_fallback(payload: Any, *, source: str) -> FallbackRecord:
    """Pick the consumed fields out of a lookup response of any shape."""

    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    return FallbackRecord(
        source=source,
        city=_text(data.get("city")),
        region=_text(data.get("region")),
        latitude=_number(data.get("latitude")),
        longitude=_number(data.get("longitude")),
        timezone=_text(data.get("timezone")),
        postal_code=_text(data.get("postal")),
        org=_text(data.get("org")),
    )


def merge_fallback(record: LocationRecord, fallback: FallbackRecord) -> None:
    """Copy fallback values into unset record fields; edge values always win."""

    for field in MERGEABLE_FIELDS:
        if getattr(record, field) is None:
            setattr(record, field, getattr(fallback, field))


async def fetch_fallback(client: httpx.AsyncClient, ip: str) -> FallbackRecord:
    """Look up ``ip`` with the configured service.

    Raises ``httpx.HTTPError`` for transport failures and non-2xx replies,
    ``httpx.InvalidURL`` when the formatted URL is malformed and ``ValueError``
    when the body is not JSON. A closed client raises ``RuntimeError``.
    """

    url = config.LOCATION_FALLBACK_URL.format(ip=quote(ip, safe=":."))
    response = await client.get(url)
    response.raise_for_status()
    return parse_fallback(response.json(), source=config.LOCATION_FALLBACK_SOURCE)


async def enhance_location(record: LocationRecord, client: httpx.AsyncClient) -> LocationRecord:
    """Escalate a sparse record to the fallback service.

    Failures never propagate: the error text is stored on ``fallback_error``
    and the baseline record is returned otherwise untouched.
    """

    if not needs_enhancement(record):
        return record

    try:
        fallback = await fetch_fallback(client, record.ip)
    except (httpx.HTTPError, httpx.InvalidURL, RuntimeError, ValueError) as exc:
        logger.warning(
            "Location fallback lookup failed",
            extra={
                "event_action": "location_fallback_failed",
                "error_type": type(exc).__name__,
                "error_message": str(exc)[:256],
            },
        )
        increment_fallback_requests("error")
        record.fallback_error = str(exc)
        return record

    record.fallback = fallback
    merge_fallback(record, fallback)
    record.data_quality.enhanced = True
    record.data_quality.enhanced_score = score_record(record)
    increment_fallback_requests("success")
    return record

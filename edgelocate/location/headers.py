"""Build location records from edge-injected request headers."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Final

from ..schemas import LocationRecord
from ..utils.network import get_client_ip, header_value, ip_type
from .quality import POSTAL_CODE_HEADERS, score_headers

# Plain string fields copied verbatim from their header.
TEXT_HEADERS: Final[dict[str, str]] = {
    "country": "CF-IPCountry",
    "region": "CF-Region",
    "region_code": "CF-Region-Code",
    "city": "CF-IPCity",
    "timezone": "CF-Timezone",
    "continent": "CF-IPContinent",
    "user_agent": "User-Agent",
    "accept_language": "Accept-Language",
    "request_id": "CF-Ray",
    "visitor_id": "CF-Visitor",
}
FLOAT_HEADERS: Final[dict[str, str]] = {
    "latitude": "CF-IPLatitude",
    "longitude": "CF-IPLongitude",
}
INT_HEADERS: Final[dict[str, str]] = {
    "metro_code": "CF-MetroCode",
    "asn": "CF-ASN",
}
TRACE_ID_HEADER: Final[str] = "CF-Ray"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _parse_int(value: str | None) -> int | None:
    """Read the leading decimal digits, so ``"12abc"`` is 12 and ``"1.5"`` is 1."""

    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def colo_from_trace_id(trace_id: str | None) -> str | None:
    """Return the data-center code from a ``<id>-<colo>`` trace identifier."""

    if not trace_id:
        return None
    parts = trace_id.split("-")
    if len(parts) < 2:
        return None
    return parts[1] or None


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extract_location(headers: Mapping[str, str]) -> LocationRecord:
    """Build a scored location record from the request headers.

    ``headers`` must be case-insensitive (Starlette ``Headers`` is). Missing,
    empty or malformed values leave the matching field unset.
    """

    ip = get_client_ip(headers)

    fields: dict[str, object] = {
        name: header_value(headers, header) for name, header in TEXT_HEADERS.items()
    }
    for name, header in FLOAT_HEADERS.items():
        fields[name] = _parse_float(header_value(headers, header))
    for name, header in INT_HEADERS.items():
        fields[name] = _parse_int(header_value(headers, header))
    fields["postal_code"] = next(
        (
            value
            for value in (header_value(headers, name) for name in POSTAL_CODE_HEADERS)
            if value
        ),
        None,
    )

    return LocationRecord(
        ip=ip,
        ip_type=ip_type(ip),
        colo=colo_from_trace_id(header_value(headers, TRACE_ID_HEADER)),
        timestamp=utc_timestamp(),
        data_quality=score_headers(headers),
        **fields,
    )

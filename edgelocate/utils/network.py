"""Network-related utility functions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

UNKNOWN_IP: Final[str] = "unknown"

_CONNECTING_IP_HEADER = "cf-connecting-ip"
_FORWARDED_FOR_HEADER = "x-forwarded-for"


def header_value(headers: Mapping[str, str], name: str) -> str | None:
    """Return a stripped header value, treating empty values as missing."""

    raw = headers.get(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def get_client_ip(headers: Mapping[str, str]) -> str:
    """Return the visitor IP reported by the edge platform.

    ``CF-Connecting-IP`` wins; otherwise the first ``X-Forwarded-For`` hop is
    used. The edge is trusted to have set these, so the values are not
    validated as addresses.
    """

    connecting_ip = header_value(headers, _CONNECTING_IP_HEADER)
    if connecting_ip:
        return connecting_ip

    forwarded_for = headers.get(_FORWARDED_FOR_HEADER)
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    return UNKNOWN_IP


def ip_type(ip: str) -> str:
    """Classify an address as ``IPv6`` when it contains a colon."""

    return "IPv6" if ":" in ip else "IPv4"

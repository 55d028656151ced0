"""Utilities for handling IP address logging policies."""

from __future__ import annotations

import ipaddress
import os
from typing import Optional

_VALID_MODES = {"full", "anonymized", "off"}


def ip_log_mode(mode: Optional[str] = None) -> str:
    """Return the effective IP logging mode, defaulting to ``full``."""

    value = (mode if mode is not None else os.getenv("LOG_IP_MODE")) or "full"
    value = value.lower()
    return value if value in _VALID_MODES else "full"


def anonymize_ip(ip: Optional[str], mode: Optional[str] = None) -> Optional[str]:
    """Return an IP address formatted according to the configured mode."""

    mode_value = ip_log_mode(mode)
    if mode_value == "off":
        return None

    if not ip or ip == "unknown":
        return "unknown"

    try:
        parsed = ipaddress.ip_address(ip)
    except ValueError:
        return "unknown"

    if mode_value == "anonymized":
        prefix = 24 if parsed.version == 4 else 64
        return ipaddress.ip_network(f"{parsed}/{prefix}", strict=False).with_prefixlen

    return str(parsed)

"""Helpers for emitting structured operational metrics via logging."""

from __future__ import annotations

import logging

from .config import SERVICE_NAME

_metrics_logger = logging.getLogger("edgelocate.metrics")


def increment_location_requests(route: str, quality_level: str) -> None:
    """Emit a counter metric for served location responses."""

    _metrics_logger.info(
        "location response served",
        extra={
            "event_dataset": f"{SERVICE_NAME}.metrics",
            "event_action": "location_request",
            "metric_name": "location_requests_total",
            "metric_type": "counter",
            "metric_value": 1,
            "location_route": route,
            "quality_level": quality_level,
        },
    )


def increment_fallback_requests(outcome: str) -> None:
    """Emit a counter metric for fallback lookups by outcome."""

    _metrics_logger.info(
        "location fallback lookup finished",
        extra={
            "event_dataset": f"{SERVICE_NAME}.metrics",
            "event_action": "location_fallback",
            "metric_name": "location_fallback_requests_total",
            "metric_type": "counter",
            "metric_value": 1,
            "fallback_outcome": outcome,
        },
    )


__all__ = ["increment_fallback_requests", "increment_location_requests"]

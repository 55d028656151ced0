"""Public entry point for configuring application logging."""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Any

from ..config import SERVICE_NAME


def configure_logging() -> None:
    """Configure structured stdout logging for the service."""

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    json_enabled = os.getenv("LOG_JSON", "true").lower() in {"1", "true", "yes", "on"}

    formatters: dict[str, dict[str, Any]] = {
        "json": {
            "()": "edgelocate.logging.formatter.ECSJsonFormatter",
            "service_name": SERVICE_NAME,
        },
        "plain": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": {
            "context": {"()": "edgelocate.logging.filters.RequestContextFilter"},
            "privacy": {"()": "edgelocate.logging.filters.PrivacyFilter"},
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "json" if json_enabled else "plain",
                "filters": ["context", "privacy"],
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": log_level, "handlers": ["stdout"]},
        "loggers": {
            "uvicorn": {"level": "INFO", "handlers": [], "propagate": True},
            "uvicorn.error": {"level": "INFO", "handlers": [], "propagate": True},
            # LoggingMiddleware already writes one access line per request.
            "uvicorn.access": {"level": "WARNING", "handlers": [], "propagate": True},
            "httpx": {"level": "WARNING", "handlers": [], "propagate": True},
        },
    }

    logging.config.dictConfig(logging_config)
    logging.captureWarnings(True)

"""Access logging for the location routes."""

from __future__ import annotations

import logging
import os
import random
import time
import traceback
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..config import SERVICE_NAME
from ..logging import anonymize_ip, bind_request_context, reset_request_context
from ..utils.network import get_client_ip

REQUEST_ID_HEADER = "X-Request-ID"


def _env_fraction(name: str, default: float) -> float:
    """Read a non-negative float, falling back to ``default`` on bad input."""

    try:
        value = float(os.getenv(name, default))
    except ValueError:
        return default
    return default if value < 0 else value


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Write one ECS access record per request and echo the request id.

    Fast successful ``/health`` polls are dropped. Other successes are
    sampled with ``ACCESS_LOG_SAMPLE``; failures and requests slower than
    ``SLOW_REQUEST_MS`` are always written.
    """

    noise_paths = frozenset({"/health"})

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.logger = logging.getLogger("edgelocate.access")
        self.sample_rate = min(1.0, _env_fraction("ACCESS_LOG_SAMPLE", 1.0))
        self.slow_request_ns = int(_env_fraction("SLOW_REQUEST_MS", 500.0) * 1_000_000)
        self.random = random.SystemRandom()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter_ns()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        client_ip = anonymize_ip(get_client_ip(request.headers))
        tokens = bind_request_context(request_id=request_id, client_ip=client_ip)

        failure: dict[str, Any] = {}
        status_code = 500
        try:
            response = await call_next(request)
        except Exception as exc:
            # Unhandled errors still reach the 500 handler in main.py.
            failure = {
                "error_type": type(exc).__name__,
                "error_message": str(exc),
                "error_stack": "".join(traceback.format_exception(exc)),
            }
            raise
        else:
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            duration_ns = time.perf_counter_ns() - started
            if self._should_log(request.url.path, status_code, duration_ns):
                self._write(request, status_code, duration_ns, client_ip, failure)
            reset_request_context(tokens)

    def _write(
        self,
        request: Request,
        status_code: int,
        duration_ns: int,
        client_ip: str | None,
        failure: dict[str, Any],
    ) -> None:
        extra: dict[str, Any] = {
            "http_request_method": request.method,
            "url_path": request.url.path,
            "http_status_code": status_code,
            "event_duration": duration_ns,
            "client_ip": client_ip,
            "user_agent": request.headers.get("User-Agent") or None,
            "event_dataset": f"{SERVICE_NAME}.access",
            **failure,
        }
        if duration_ns >= self.slow_request_ns:
            extra["event_action"] = "slow_request"
        self.logger.log(
            _level_for(status_code),
            f"{request.method} {request.url.path} -> {status_code}",
            extra=extra,
        )

    def _should_log(self, path: str, status_code: int, duration_ns: int) -> bool:
        if status_code >= 400 or duration_ns >= self.slow_request_ns:
            return True
        if path in self.noise_paths:
            return False
        return self.sample_rate >= 1.0 or self.random.random() < self.sample_rate


__all__ = ["LoggingMiddleware"]

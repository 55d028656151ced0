"""FastAPI application providing the edge location API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import ORJSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import (
    CORS_HEADERS,
    LOCATION_FALLBACK_TIMEOUT,
    LOCATION_FALLBACK_USER_AGENT,
    SERVICE_NAME,
)
from .logging import configure_logging
from .middleware.cors import CORSHeadersMiddleware
from .middleware.logging import LoggingMiddleware

configure_logging()

logger = logging.getLogger("edgelocate.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    async with httpx.AsyncClient(
        timeout=LOCATION_FALLBACK_TIMEOUT,
        headers={"User-Agent": LOCATION_FALLBACK_USER_AGENT},
    ) as client:
        app.state.http_client = client
        yield


app = FastAPI(
    title="Edge Location API",
    version=__version__,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)
app.add_middleware(CORSHeadersMiddleware, headers=CORS_HEADERS)
app.add_middleware(LoggingMiddleware)


def _set_request_id_header(response: Response, request: Request) -> None:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers["X-Request-ID"] = request_id


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler_logged(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Render unknown routes as an empty 404 and log other HTTP errors."""

    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return Response(status_code=status.HTTP_404_NOT_FOUND, headers=exc.headers)

    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    logger.log(
        level,
        "HTTP exception raised",
        extra={
            "event_dataset": f"{SERVICE_NAME}.app",
            "event_action": "http_exception",
            "http_status_code": exc.status_code,
            "http_request_method": request.method,
            "url_path": request.url.path,
            "error_type": type(exc).__name__,
            "error_message": detail[:256],
        },
    )
    return ORJSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Last-resort 500 with the error envelope and CORS headers."""

    logger.exception(
        "Unhandled error while serving request",
        extra={
            "event_action": "unhandled_exception",
            "http_status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "url_path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    response = ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "message": str(exc)},
        headers=CORS_HEADERS,
    )
    _set_request_id_header(response, request)
    return response


from .api import health_router, location_router  # noqa: E402

app.include_router(location_router)
app.include_router(health_router)

"""Endpoints describing the visitor's location from edge headers."""

import logging

import httpx
from fastapi import APIRouter, Depends, Request, Response, status

from .. import schemas
from ..location import enhance_location, extract_location
from ..metrics import increment_location_requests
from ..utils.http import PrettyORJSONResponse, set_private_cache_headers
from .deps import get_http_client

router = APIRouter()

logger = logging.getLogger("edgelocate.api.location")

LOCATION_ERROR = "Failed to process location request"
ENHANCED_LOCATION_ERROR = "Failed to process enhanced location request"

_ERROR_RESPONSES = {
    500: {
        "model": schemas.ErrorResponse,
        "description": "Unexpected failure while building the location record.",
    }
}


def _location_response(record: schemas.LocationRecord) -> Response:
    response = PrettyORJSONResponse(
        content=record.model_dump(mode="json", by_alias=True)
    )
    set_private_cache_headers(response)
    return response


def _error_response(request: Request, error: str, exc: Exception) -> Response:
    logger.exception(
        error,
        extra={
            "event_action": "location_failed",
            "url_path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    body = schemas.ErrorResponse(error=error, message=str(exc))
    return PrettyORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


# Relies on the edge (Cloudflare "Add visitor location headers" or an
# equivalent rule) injecting the CF-* geolocation headers.
@router.get(
    "/",
    response_model=schemas.LocationRecord,
    responses=_ERROR_RESPONSES,
    include_in_schema=False,
)
@router.get(
    "/location",
    response_model=schemas.LocationRecord,
    responses=_ERROR_RESPONSES,
    summary="Describe the client's location from edge headers",
)
def get_location(request: Request) -> Response:
    """Return the scored location record for the calling client."""

    try:
        record = extract_location(request.headers)
        response = _location_response(record)
    except Exception as exc:  # noqa: BLE001 - converted into the 500 envelope
        return _error_response(request, LOCATION_ERROR, exc)
    increment_location_requests("location", record.data_quality.level)
    return response


@router.get(
    "/location-enhanced",
    response_model=schemas.LocationRecord,
    responses=_ERROR_RESPONSES,
    summary="Describe the client's location, filling gaps from an IP lookup",
    description=(
        "Behaves like ``/location``. When fewer than two fifths of the location "
        "fields are present, the client IP is looked up once with the fallback "
        "service and the missing fields are filled in. A failed lookup is "
        "reported in ``fallbackError`` and never fails the request."
    ),
)
async def get_enhanced_location(
    request: Request,
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Return the scored location record, enhanced when it is sparse."""

    try:
        record = extract_location(request.headers)
        record = await enhance_location(record, http_client)
        response = _location_response(record)
    except Exception as exc:  # noqa: BLE001 - converted into the 500 envelope
        return _error_response(request, ENHANCED_LOCATION_ERROR, exc)
    increment_location_requests("location-enhanced", record.data_quality.level)
    return response

"""Liveness endpoint."""

from fastapi import APIRouter

from .. import schemas
from ..location.headers import utc_timestamp

router = APIRouter()


@router.get("/health", response_model=schemas.HealthStatus)
def health() -> schemas.HealthStatus:
    """Health check endpoint for the API."""
    return schemas.HealthStatus(timestamp=utc_timestamp())

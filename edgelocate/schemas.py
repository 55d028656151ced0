"""Pydantic schemas used for response models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel

QualityLevel = Literal["minimal", "limited", "fair", "good", "excellent", "unknown"]
IPType = Literal["IPv4", "IPv6"]


def _drop_when_unset(data: dict[str, Any], *keys: str) -> dict[str, Any]:
    """Remove optional keys that should only appear once they carry a value."""

    for key in keys:
        if key in data and data[key] is None:
            del data[key]
    return data


class QualityAssessment(BaseModel):
    """Completeness of the designated location fields."""

    score: int
    level: QualityLevel
    available_fields: int
    total_fields: int
    # Only set once a fallback lookup has been merged into the record.
    enhanced: bool | None = None
    enhanced_score: QualityAssessment | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_enhancement(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return _drop_when_unset(
            handler(self), "enhanced", "enhanced_score", "enhancedScore"
        )


class FallbackRecord(BaseModel):
    """Fields reported by the external IP geolocation service."""

    source: str
    city: str | None = None
    region: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    postal_code: str | None = None
    org: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationRecord(BaseModel):
    """Normalized location document returned by the location endpoints."""

    ip: str
    country: str | None = None
    region: str | None = None
    region_code: str | None = None
    city: str | None = None
    postal_code: str | None = None
    timezone: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    metro_code: int | None = None
    continent: str | None = None
    asn: int | None = None
    colo: str | None = None
    timestamp: str
    user_agent: str | None = None
    accept_language: str | None = None
    request_id: str | None = None
    visitor_id: str | None = None
    ip_type: IPType
    data_quality: QualityAssessment
    fallback: FallbackRecord | None = None
    fallback_error: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_fallback(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return _drop_when_unset(
            handler(self), "fallback", "fallback_error", "fallbackError"
        )


class HealthStatus(BaseModel):
    """Liveness payload for the health endpoint."""

    status: Literal["ok"] = "ok"
    timestamp: str


class ErrorResponse(BaseModel):
    """Envelope returned when a location request fails unexpectedly."""

    error: str
    message: str

"""Completeness scoring for location data."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Final

from ..schemas import LocationRecord, QualityAssessment, QualityLevel
from ..utils.network import header_value

# Country, region, city, latitude, longitude, timezone and postal code, keyed
# once by edge header and once by record attribute. Postal code arrives under
# either name depending on the edge configuration.
POSTAL_CODE_HEADERS: Final[tuple[str, ...]] = ("CF-Postal-Code", "CF-IPPostalCode")
DESIGNATED_HEADERS: Final[tuple[tuple[str, ...], ...]] = (
    ("CF-IPCountry",),
    ("CF-Region",),
    ("CF-IPCity",),
    ("CF-IPLatitude",),
    ("CF-IPLongitude",),
    ("CF-Timezone",),
    POSTAL_CODE_HEADERS,
)
DESIGNATED_FIELDS: Final[tuple[str, ...]] = (
    "country",
    "region",
    "city",
    "latitude",
    "longitude",
    "timezone",
    "postal_code",
)

# Evaluated highest first.
LEVEL_THRESHOLDS: Final[tuple[tuple[int, QualityLevel], ...]] = (
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
    (20, "limited"),
)


def quality_score(available: int, total: int) -> int:
    """Return the percentage of available fields, rounding halves up."""

    return math.floor(100 * available / total + 0.5)


def quality_level(score: int) -> QualityLevel:
    """Map a 0-100 score onto its quality tier."""

    level: QualityLevel = "unknown"
    for threshold, name in LEVEL_THRESHOLDS:
        if score >= threshold:
            level = name
            break
    else:
        level = "minimal"
    return level


def _assessment(available: int, total: int) -> QualityAssessment:
    score = quality_score(available, total)
    return QualityAssessment(
        score=score,
        level=quality_level(score),
        available_fields=available,
        total_fields=total,
    )


def score_headers(headers: Mapping[str, str]) -> QualityAssessment:
    """Score the raw edge headers of a request."""

    available = sum(
        1
        for names in DESIGNATED_HEADERS
        if any(header_value(headers, name) for name in names)
    )
    return _assessment(available, len(DESIGNATED_HEADERS))


def score_record(record: LocationRecord) -> QualityAssessment:
    """Score a (possibly merged) location record.

    A field counts when it is set, so a legitimate ``0.0`` coordinate is
    available.
    """

    available = sum(
        1 for field in DESIGNATED_FIELDS if getattr(record, field) is not None
    )
    return _assessment(available, len(DESIGNATED_FIELDS))

"""Tests for the location endpoints."""

import httpx
import pytest

from edgelocate.api import location as location_api

from .conftest import ALL_LOCATION_HEADERS

_RECORD_KEYS = [
    "ip",
    "country",
    "region",
    "regionCode",
    "city",
    "postalCode",
    "timezone",
    "latitude",
    "longitude",
    "metroCode",
    "continent",
    "asn",
    "colo",
    "timestamp",
    "userAgent",
    "acceptLanguage",
    "requestId",
    "visitorId",
    "ipType",
    "dataQuality",
]


@pytest.mark.parametrize("path", ["/", "/location"])
def test_location_without_edge_headers(client, path):
    response = client.get(path)

    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "private, no-store"
    body = response.json()
    assert list(body) == _RECORD_KEYS
    assert body["ip"] == "unknown"
    assert body["ipType"] == "IPv4"
    assert body["city"] is None
    assert body["latitude"] is None
    assert body["colo"] is None
    assert body["dataQuality"] == {
        "score": 0,
        "level": "minimal",
        "availableFields": 0,
        "totalFields": 7,
    }
    assert "fallback" not in body
    assert "fallbackError" not in body


def test_location_with_all_headers(client):
    response = client.get("/location", headers=ALL_LOCATION_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["ip"] == "203.0.113.7"
    assert body["city"] == "Paris"
    assert body["postalCode"] == "75001"
    assert body["latitude"] == pytest.approx(48.8566)
    assert body["metroCode"] == 0
    assert body["asn"] == 3215
    assert body["colo"] == "CDG"
    assert body["requestId"] == "8a1b2c3d4e5f6789-CDG"
    assert body["userAgent"] == "testclient"
    assert body["dataQuality"] == {
        "score": 100,
        "level": "excellent",
        "availableFields": 7,
        "totalFields": 7,
    }


def test_location_reports_ipv6(client):
    body = client.get("/location", headers={"CF-Connecting-IP": "2001:db8::1"}).json()
    assert body["ip"] == "2001:db8::1"
    assert body["ipType"] == "IPv6"


def test_location_is_pretty_printed(client):
    response = client.get("/location")
    assert response.text.startswith('{\n  "ip": "unknown"')


def test_location_never_calls_lookup(client, fallback_service):
    client.get("/location")
    assert fallback_service.requests == []


def test_enhanced_location_fills_gaps(client, fallback_service):
    fallback_service.handler = lambda request: httpx.Response(
        200, json={"city": "Paris", "region": "IDF"}
    )

    response = client.get(
        "/location-enhanced", headers={"CF-Connecting-IP": "198.51.100.4"}
    )

    assert response.status_code == 200
    body = response.json()
    assert len(fallback_service.requests) == 1
    assert body["city"] == "Paris"
    assert body["region"] == "IDF"
    for key in ("latitude", "longitude", "timezone", "postalCode"):
        assert body[key] is None
    assert body["fallback"] == {
        "source": "ipapi.co",
        "city": "Paris",
        "region": "IDF",
        "latitude": None,
        "longitude": None,
        "timezone": None,
        "postalCode": None,
        "org": None,
    }
    assert body["dataQuality"]["level"] == "minimal"
    assert body["dataQuality"]["enhanced"] is True
    assert body["dataQuality"]["enhancedScore"] == {
        "score": 29,
        "level": "limited",
        "availableFields": 2,
        "totalFields": 7,
    }
    assert "fallbackError" not in body


def test_enhanced_location_survives_network_errors(client, fallback_service):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    fallback_service.handler = refuse

    response = client.get("/location-enhanced", headers={"CF-IPCity": "Paris"})

    assert response.status_code == 200
    body = response.json()
    assert body["fallbackError"] == "connection refused"
    assert body["city"] == "Paris"
    assert body["region"] is None
    assert "fallback" not in body
    assert "enhanced" not in body["dataQuality"]


def test_enhanced_location_survives_error_status(client, fallback_service):
    fallback_service.handler = lambda request: httpx.Response(503)

    response = client.get("/location-enhanced")

    assert response.status_code == 200
    assert "503" in response.json()["fallbackError"]


@pytest.mark.parametrize(
    "headers,level",
    [
        pytest.param(
            {
                "CF-IPCountry": "FR",
                "CF-Region": "Ile-de-France",
                "CF-IPCity": "Paris",
                "CF-IPLatitude": "48.8566",
                "CF-IPLongitude": "2.3522",
            },
            "good",
            id="good",
        ),
        pytest.param(ALL_LOCATION_HEADERS, "excellent", id="excellent"),
    ],
)
def test_enhanced_location_skips_lookup_for_good_headers(client, fallback_service, headers, level):
    response = client.get("/location-enhanced", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["dataQuality"]["level"] == level
    assert fallback_service.requests == []
    assert "fallback" not in body
    assert "fallbackError" not in body
    assert "enhanced" not in body["dataQuality"]
    assert "enhancedScore" not in body["dataQuality"]


@pytest.mark.parametrize(
    "path,error",
    [
        ("/location", "Failed to process location request"),
        ("/location-enhanced", "Failed to process enhanced location request"),
    ],
)
def test_location_internal_failure_returns_error_envelope(client, monkeypatch, path, error):
    def explode(headers):
        raise RuntimeError("header parsing exploded")

    monkeypatch.setattr(location_api, "extract_location", explode)

    response = client.get(path)

    assert response.status_code == 500
    assert response.json() == {"error": error, "message": "header parsing exploded"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "Traceback" not in response.text

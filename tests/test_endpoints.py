from datetime import datetime

import pytest

_CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization",
    "access-control-max-age": "86400",
}


def _assert_cors(response):
    for header, value in _CORS_HEADERS.items():
        assert response.headers.get(header) == value, header


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert set(body) == {"status", "timestamp"}
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
    _assert_cors(response)


def test_unknown_route_returns_empty_404(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.content == b""
    _assert_cors(response)


@pytest.mark.parametrize("path", ["/", "/location", "/location-enhanced", "/health", "/anything"])
def test_preflight_is_answered_on_any_path(client, path):
    response = client.options(
        path,
        headers={
            "Origin": "http://any.example",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == 200
    assert response.content == b""
    _assert_cors(response)


def test_plain_options_without_preflight_headers(client):
    response = client.options("/location")
    assert response.status_code == 200
    _assert_cors(response)


@pytest.mark.parametrize("path", ["/", "/location", "/location-enhanced"])
def test_location_routes_carry_cors_headers(client, path):
    _assert_cors(client.get(path))


def test_request_id_is_echoed(client):
    response = client.get("/location", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"


def test_request_id_is_generated(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]

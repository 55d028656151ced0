import os
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import Headers

# The suite relies on the default CORS headers and the default lookup URL.
# Local overrides used for manual testing would otherwise leak into the
# assertions, so normalise them before the app initialises.
for _name in (
    "CORS_ALLOW_ORIGIN",
    "CORS_ALLOW_METHODS",
    "CORS_ALLOW_HEADERS",
    "CORS_MAX_AGE",
    "LOCATION_FALLBACK_URL",
    "LOCATION_FALLBACK_SOURCE",
    "LOCATION_FALLBACK_TIMEOUT",
):
    os.environ.pop(_name, None)
os.environ.setdefault("LOG_JSON", "false")
os.environ["ACCESS_LOG_SAMPLE"] = "1.0"

from edgelocate.api.deps import get_http_client  # noqa: E402
from edgelocate.main import app  # noqa: E402

ALL_LOCATION_HEADERS = {
    "CF-Connecting-IP": "203.0.113.7",
    "CF-IPCountry": "FR",
    "CF-Region": "Ile-de-France",
    "CF-Region-Code": "IDF",
    "CF-IPCity": "Paris",
    "CF-IPPostalCode": "75001",
    "CF-Timezone": "Europe/Paris",
    "CF-IPLatitude": "48.8566",
    "CF-IPLongitude": "2.3522",
    "CF-MetroCode": "0",
    "CF-IPContinent": "EU",
    "CF-ASN": "3215",
    "CF-Ray": "8a1b2c3d4e5f6789-CDG",
    "CF-Visitor": '{"scheme":"https"}',
}


def make_headers(values: dict[str, str] | None = None) -> Headers:
    """Case-insensitive header mapping as seen by the request handlers."""

    return Headers(headers=values or {})


class FallbackService:
    """Stand-in for the IP lookup service behind ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: (
            httpx.Response(200, json={})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fallback_service() -> FallbackService:
    return FallbackService()


@pytest.fixture
def client(fallback_service):
    http_client = fallback_service.client()
    app.dependency_overrides[get_http_client] = lambda: http_client
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_http_client, None)

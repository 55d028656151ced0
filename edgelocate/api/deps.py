"""Shared dependencies for API routes."""

import httpx
from fastapi import Request


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the outbound HTTP client created during application startup."""

    return request.app.state.http_client

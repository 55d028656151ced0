"""Middleware that answers preflights and adds permissive CORS headers."""

from collections.abc import Mapping

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Apply fixed CORS headers to every response.

    ``OPTIONS`` requests on any path are answered directly with an empty 200,
    so browsers can preflight without the route existing for that method.
    """

    def __init__(self, app: ASGIApp, headers: Mapping[str, str] | None = None) -> None:
        super().__init__(app)
        self._headers: Mapping[str, str] = headers or {}

    async def dispatch(self, request, call_next):  # type: ignore[override]
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=dict(self._headers))

        response = await call_next(request)
        for header, value in self._headers.items():
            response.headers[header] = value
        return response

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(headers={dict(self._headers)!r})"

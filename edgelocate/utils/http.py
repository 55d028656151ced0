"""HTTP response helpers for consistent output and caching behaviour."""

from typing import Any

import orjson
from fastapi import Response
from fastapi.responses import ORJSONResponse


class PrettyORJSONResponse(ORJSONResponse):
    """ORJSON response indented with two spaces for human readers."""

    def render(self, content: Any) -> bytes:
        return orjson.dumps(
            content, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS
        )


def set_private_cache_headers(response: Response) -> None:
    """Prevent caching of responses that describe a single visitor."""

    response.headers["Cache-Control"] = "private, no-store"

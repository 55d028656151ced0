"""Router modules for the edge location API."""

from .health import router as health_router
from .location import router as location_router

__all__ = ["health_router", "location_router"]

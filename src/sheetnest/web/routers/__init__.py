"""API routers for the REST API."""

from sheetnest.web.routers.nest import router as nest_router
from sheetnest.web.routers.validate import router as validate_router

__all__ = [
    "nest_router",
    "validate_router",
]

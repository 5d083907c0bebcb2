"""Request and response schemas for the REST API."""

from sheetnest.web.schemas.requests import (
    ConfigValidateRequest,
    NestRequest,
    NestTextRequest,
)
from sheetnest.web.schemas.responses import (
    NestingResultSchema,
    PlacedPartSchema,
    SheetLayoutSchema,
    ValidationResultSchema,
)

__all__ = [
    "ConfigValidateRequest",
    "NestRequest",
    "NestTextRequest",
    "NestingResultSchema",
    "PlacedPartSchema",
    "SheetLayoutSchema",
    "ValidationResultSchema",
]

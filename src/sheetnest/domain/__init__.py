"""Domain layer - part, sheet and layout model."""

from .entities import (
    MaterialPackingResult,
    NestingResult,
    PackedSheet,
    PartInstance,
    PlacedPart,
    SheetLayout,
)
from .exceptions import EmptyPartListError, NestingError, ValidationError
from .orientation import effective_dimensions, legal_orientations
from .value_objects import (
    DEFAULT_MATERIAL,
    DEFAULT_SHEET_HEIGHT,
    DEFAULT_SHEET_WIDTH,
    GrainDirection,
    HaltReason,
    OrientationOptions,
    PartSpec,
    SheetSize,
    SheetSizeConfig,
)

__all__ = [
    "DEFAULT_MATERIAL",
    "DEFAULT_SHEET_HEIGHT",
    "DEFAULT_SHEET_WIDTH",
    "EmptyPartListError",
    "GrainDirection",
    "HaltReason",
    "MaterialPackingResult",
    "NestingError",
    "NestingResult",
    "OrientationOptions",
    "PackedSheet",
    "PartInstance",
    "PartSpec",
    "PlacedPart",
    "SheetLayout",
    "SheetSize",
    "SheetSizeConfig",
    "ValidationError",
    "effective_dimensions",
    "legal_orientations",
]

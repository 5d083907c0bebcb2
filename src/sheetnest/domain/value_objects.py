"""Value objects for the nesting domain.

Dimensions are in millimetres. All value objects are frozen dataclasses so
they can be shared freely between material groups packed in parallel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from sheetnest.domain.exceptions import ValidationError

DEFAULT_MATERIAL = "Default_Material"
DEFAULT_SHEET_WIDTH = 2440.0
DEFAULT_SHEET_HEIGHT = 1220.0


class GrainDirection(str, Enum):
    """Wood-grain constraint for a part.

    Attributes:
        WITH: Part must be placed as defined (no rotation unless square).
        REVERSE: Part must be placed with width and height exchanged.
        NONE: No grain constraint, part can rotate freely.
    """

    WITH = "with"
    REVERSE = "reverse"
    NONE = "none"

    @classmethod
    def parse(cls, value: "GrainDirection | str | None") -> "GrainDirection":
        """Parse a grain value, case-insensitively.

        ``None`` maps to NONE.

        Raises:
            ValueError: If the value is not a known grain direction.
        """
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(g.value for g in cls)
        raise ValueError(f"Invalid grain direction {value!r}; expected one of: {valid}")


class HaltReason(str, Enum):
    """Why packing stopped for a material group.

    Attributes:
        COMPLETE: Every instance was placed.
        NO_PROGRESS: A full pass over a fresh sheet placed nothing.
        SHEET_CAP: The per-material sheet limit was reached.
    """

    COMPLETE = "complete"
    NO_PROGRESS = "no_progress"
    SHEET_CAP = "sheet_cap"


@dataclass(frozen=True)
class OrientationOptions:
    """Placements that are legal for a part.

    Attributes:
        as_defined: Part may be placed with its width along the sheet width.
        rotated: Part may be placed turned 90 degrees.
    """

    as_defined: bool
    rotated: bool


@dataclass(frozen=True)
class SheetSize:
    """Nominal dimensions of a stock sheet."""

    width: float = DEFAULT_SHEET_WIDTH
    height: float = DEFAULT_SHEET_HEIGHT

    def __post_init__(self) -> None:
        if not math.isfinite(self.width) or self.width <= 0:
            raise ValueError("Sheet width must be a positive finite number")
        if not math.isfinite(self.height) or self.height <= 0:
            raise ValueError("Sheet height must be a positive finite number")

    @property
    def area(self) -> float:
        """Sheet area in square millimetres."""
        return self.width * self.height


@dataclass(frozen=True)
class SheetSizeConfig:
    """Sheet size per material key, with a fallback default.

    Attributes:
        sizes: Explicit sheet sizes keyed by material.
        default: Size used for materials without an explicit entry.
    """

    sizes: Mapping[str, SheetSize] = field(default_factory=dict)
    default: SheetSize = field(default_factory=SheetSize)

    def resolve(self, material: str) -> SheetSize:
        """Return the sheet size for a material."""
        return self.sizes.get(material, self.default)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any] | None,
        default: SheetSize | None = None,
    ) -> "SheetSizeConfig":
        """Build a config from plain data like ``{"MDF": {"width": 2800, "height": 2070}}``.

        Raises:
            ValidationError: If the mapping or any entry has the wrong shape.
        """
        default = default or SheetSize()
        if data is None:
            return cls(default=default)
        if not isinstance(data, Mapping):
            raise ValidationError(
                [f"Sheet sizes must be a mapping of material to size, got {type(data).__name__}"],
                [data],
            )

        errors: list[str] = []
        offending: list[Any] = []
        sizes: dict[str, SheetSize] = {}
        for material, entry in data.items():
            problem = _sheet_entry_problem(entry)
            if problem is not None:
                errors.append(f"Sheet size for material {material!r}: {problem}")
                offending.append({material: entry})
                continue
            sizes[str(material)] = SheetSize(
                width=float(entry["width"]), height=float(entry["height"])
            )

        if errors:
            raise ValidationError(errors, offending)
        return cls(sizes=sizes, default=default)


def _sheet_entry_problem(entry: Any) -> str | None:
    if not isinstance(entry, Mapping):
        return "expected an object with 'width' and 'height'"
    for key in ("width", "height"):
        value = entry.get(key)
        if not _is_number(value):
            return f"'{key}' must be a number"
        if value <= 0:
            return f"'{key}' must be positive"
    return None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class PartSpec:
    """A rectangular part with a quantity, as supplied by the caller.

    Attributes:
        name: Part name, used to derive instance identifiers.
        width: Part width in millimetres.
        height: Part height in millimetres.
        quantity: Number of identical units to cut.
        material: Material key; None or blank means the default material.
        grain: Grain constraint for rotation.
    """

    name: str
    width: float
    height: float
    quantity: int
    material: str | None = None
    grain: GrainDirection | str | None = GrainDirection.NONE

    def validate(self) -> list[str]:
        """Validate the spec and return a list of error messages."""
        errors: list[str] = []
        if not isinstance(self.name, str) or not self.name.strip():
            errors.append("name must be a non-empty string")
        if not _is_number(self.width) or self.width <= 0:
            errors.append(f"width must be a positive number (got {self.width!r})")
        if not _is_number(self.height) or self.height <= 0:
            errors.append(f"height must be a positive number (got {self.height!r})")
        if (
            isinstance(self.quantity, bool)
            or not isinstance(self.quantity, int)
            or self.quantity <= 0
        ):
            errors.append(f"quantity must be a positive integer (got {self.quantity!r})")
        if self.material is not None and not isinstance(self.material, str):
            errors.append(f"material must be a string (got {self.material!r})")
        try:
            GrainDirection.parse(self.grain)
        except ValueError as e:
            errors.append(str(e))
        return errors

    @property
    def material_key(self) -> str:
        """Material group key, falling back to the default material."""
        if self.material is None or not self.material.strip():
            return DEFAULT_MATERIAL
        return self.material

    @property
    def grain_direction(self) -> GrainDirection:
        """Grain as an enum value."""
        return GrainDirection.parse(self.grain)

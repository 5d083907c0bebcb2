"""Entities produced and consumed during a packing run."""

from __future__ import annotations

from dataclasses import dataclass, field

from sheetnest.domain.value_objects import GrainDirection, HaltReason, SheetSize


@dataclass
class PartInstance:
    """One physical unit of a part spec.

    ``packed`` is the only field the packer mutates. Instances live for a
    single packing run.
    """

    instance_id: str
    name: str
    original_width: float
    original_height: float
    material: str
    grain: GrainDirection = GrainDirection.NONE
    packed: bool = False

    @property
    def is_square(self) -> bool:
        return self.original_width == self.original_height

    @property
    def area(self) -> float:
        return self.original_width * self.original_height


@dataclass(frozen=True)
class PlacedPart:
    """A part instance placed at a position on a sheet.

    Coordinates are the top-left offset from the sheet origin.

    Attributes:
        instance: The placed part instance.
        x: Horizontal offset from the left edge of the sheet.
        y: Vertical offset from the top edge of the sheet.
        rotated: True if the instance is turned 90 degrees.
    """

    instance: PartInstance
    x: float
    y: float
    rotated: bool = False

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def placed_width(self) -> float:
        """Width occupied on the sheet (accounts for rotation)."""
        if self.rotated:
            return self.instance.original_height
        return self.instance.original_width

    @property
    def placed_height(self) -> float:
        """Height occupied on the sheet (accounts for rotation)."""
        if self.rotated:
            return self.instance.original_width
        return self.instance.original_height

    @property
    def right_edge(self) -> float:
        return self.x + self.placed_width

    @property
    def bottom_edge(self) -> float:
        return self.y + self.placed_height


@dataclass(frozen=True)
class PackedSheet:
    """Placements made on one sheet, before global numbering."""

    material: str
    sheet_size: SheetSize
    placements: tuple[PlacedPart, ...]


@dataclass(frozen=True)
class SheetLayout:
    """Final layout of one sheet.

    Attributes:
        id: Sheet number, monotonic across the whole run (1-based).
        material: Material key of every part on the sheet.
        sheet_width: Nominal sheet width.
        sheet_height: Nominal sheet height.
        parts: Placed parts in placement order.
        used_width: Right edge of the placed-part bounding box, kerf included.
        used_height: Bottom edge of the placed-part bounding box, kerf included.
        efficiency_percent: Kerf-inclusive part area over sheet area, 1 decimal.
    """

    id: int
    material: str
    sheet_width: float
    sheet_height: float
    parts: tuple[PlacedPart, ...]
    used_width: float
    used_height: float
    efficiency_percent: float

    @property
    def part_count(self) -> int:
        return len(self.parts)

    @property
    def area(self) -> float:
        return self.sheet_width * self.sheet_height


@dataclass(frozen=True)
class MaterialPackingResult:
    """Outcome of packing a single material group.

    Attributes:
        material: Material key of the group.
        sheet_size: Sheet size the group was packed against.
        sheets: Sheets in the order they were opened.
        unpacked: Instances that could not be placed.
        halt_reason: Why the packing loop stopped.
    """

    material: str
    sheet_size: SheetSize
    sheets: tuple[PackedSheet, ...]
    unpacked: tuple[PartInstance, ...]
    halt_reason: HaltReason

    @property
    def packed_count(self) -> int:
        return sum(len(sheet.placements) for sheet in self.sheets)

    @property
    def total_instances(self) -> int:
        return self.packed_count + len(self.unpacked)


@dataclass(frozen=True)
class NestingResult:
    """Complete result of a nesting run.

    The layout is returned even when ``success`` is False so callers can
    render the partial result.
    """

    success: bool
    message: str
    sheets: tuple[SheetLayout, ...]
    total_instances: int
    total_packed: int
    total_unpacked: int
    unpacked_ids: tuple[str, ...] = ()
    halt_reasons: dict[str, HaltReason] = field(default_factory=dict)

    @property
    def total_sheets(self) -> int:
        return len(self.sheets)

    @property
    def sheets_by_material(self) -> dict[str, int]:
        """Sheet count per material, in material group order."""
        counts: dict[str, int] = {}
        for sheet in self.sheets:
            counts[sheet.material] = counts.get(sheet.material, 0) + 1
        return counts

    @property
    def overall_efficiency_percent(self) -> float:
        """Area-weighted efficiency across all sheets."""
        total_area = sum(sheet.area for sheet in self.sheets)
        if total_area == 0:
            return 0.0
        weighted = sum(sheet.efficiency_percent * sheet.area for sheet in self.sheets)
        return round(weighted / total_area, 1)

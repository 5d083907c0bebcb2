"""Shelf bin packing of rectangular parts onto stock sheets.

Pipeline: part specs are expanded into one instance per unit, grouped by
material, sorted by decreasing effective height, and packed row by row
(First-Fit Decreasing Height) onto as many sheets as needed. Each material
group is packed independently against its own sheet size; the per-material
results are then folded into a single NestingResult with globally numbered
sheets.

Packing is deterministic: identical input produces identical placements.
"""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Sequence

from sheetnest.domain.entities import (
    MaterialPackingResult,
    NestingResult,
    PackedSheet,
    PartInstance,
    PlacedPart,
    SheetLayout,
)
from sheetnest.domain.exceptions import EmptyPartListError, ValidationError
from sheetnest.domain.orientation import effective_dimensions, legal_orientations
from sheetnest.domain.value_objects import (
    HaltReason,
    PartSpec,
    SheetSize,
    SheetSizeConfig,
)

logger = logging.getLogger(__name__)

# Saw-blade clearance added to both dimensions of every placement (mm)
KERF = 3.0

# Safety bound on sheets opened for a single material
MAX_SHEETS_PER_MATERIAL = 50


@dataclass(frozen=True)
class NestingConfig:
    """Configuration for a nesting run.

    Attributes:
        kerf: Clearance added to both dimensions of each placement.
        max_sheets_per_material: Sheets that may be opened per material.
        default_sheet: Sheet size for materials without an explicit size.
        max_workers: Material groups packed concurrently (1 = sequential).
    """

    kerf: float = KERF
    max_sheets_per_material: int = MAX_SHEETS_PER_MATERIAL
    default_sheet: SheetSize = field(default_factory=SheetSize)
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.kerf < 0:
            raise ValueError("Kerf must be non-negative")
        if self.max_sheets_per_material < 1:
            raise ValueError("Max sheets per material must be at least 1")
        if self.max_workers < 1:
            raise ValueError("Max workers must be at least 1")


def expand_parts(specs: Iterable[PartSpec]) -> list[PartInstance]:
    """Expand part specs into one instance per unit of quantity.

    Every spec is validated before any instance is created.

    Args:
        specs: Part specs in input order.

    Returns:
        Instances in input order, ``quantity`` per spec.

    Raises:
        EmptyPartListError: If no specs are given.
        ValidationError: If any spec is malformed. Lists every problem.
    """
    specs = list(specs)
    if not specs:
        raise EmptyPartListError()

    errors: list[str] = []
    offending: list[PartSpec] = []
    for index, spec in enumerate(specs, start=1):
        problems = spec.validate()
        if problems:
            offending.append(spec)
            errors.extend(f"Part {index} ({spec.name!r}): {problem}" for problem in problems)
    if errors:
        raise ValidationError(errors, offending)

    name_counts = Counter(spec.name for spec in specs)
    instances: list[PartInstance] = []
    for index, spec in enumerate(specs, start=1):
        # Repeated names get the spec position so ids stay unique
        prefix = spec.name if name_counts[spec.name] == 1 else f"{spec.name}#{index}"
        material = spec.material_key
        grain = spec.grain_direction
        for unit in range(spec.quantity):
            instances.append(
                PartInstance(
                    instance_id=f"{prefix}_{unit + 1}",
                    name=spec.name,
                    original_width=float(spec.width),
                    original_height=float(spec.height),
                    material=material,
                    grain=grain,
                )
            )
    return instances


def group_by_material(
    instances: Sequence[PartInstance],
) -> dict[str, list[PartInstance]]:
    """Group instances by material key, in order of first appearance."""
    groups: dict[str, list[PartInstance]] = {}
    for instance in instances:
        groups.setdefault(instance.material, []).append(instance)
    return groups


def sort_for_packing(instances: Sequence[PartInstance]) -> list[PartInstance]:
    """Order instances for First-Fit Decreasing Height.

    Descending by effective height, ties broken by descending effective
    width. Fully tied instances keep their input order.
    """
    return sorted(instances, key=effective_dimensions, reverse=True)


@dataclass
class _ShelfState:
    """Cursor state for the sheet currently being filled.

    Attributes:
        cursor_x: X position for the next part in the current row.
        cursor_y: Y position of the current row.
        row_max_height: Tallest placement in the current row, kerf included.
    """

    cursor_x: float = 0.0
    cursor_y: float = 0.0
    row_max_height: float = 0.0

    @property
    def next_row_y(self) -> float:
        return self.cursor_y + self.row_max_height


class ShelfPacker:
    """Row-by-row shelf packer.

    Each sheet is filled left to right in rows. For every instance the
    packer tries, in order: as defined at the cursor, as defined at the
    start of a new row, rotated at the cursor, rotated at a new row. The
    first candidate that fits wins. Instances that fit nowhere are left
    for the next sheet.

    Attributes:
        kerf: Clearance added to both dimensions of each placement.
        max_sheets: Sheets that may be opened per material.
    """

    def __init__(
        self,
        kerf: float = KERF,
        max_sheets: int = MAX_SHEETS_PER_MATERIAL,
    ) -> None:
        self.kerf = kerf
        self.max_sheets = max_sheets

    def pack_material(
        self,
        material: str,
        instances: Sequence[PartInstance],
        sheet_size: SheetSize,
    ) -> MaterialPackingResult:
        """Pack one material group onto as many sheets as needed.

        Stops when every instance is placed, when a fresh sheet receives
        nothing, or when ``max_sheets`` sheets have been filled.

        Args:
            material: Material key of the group.
            instances: Instances of this material (any order).
            sheet_size: Sheet size for this material.

        Returns:
            MaterialPackingResult with sheets, leftovers and halt reason.
        """
        remaining = [i for i in sort_for_packing(instances) if not i.packed]
        sheets: list[PackedSheet] = []
        halt_reason = HaltReason.COMPLETE

        while remaining:
            if len(sheets) >= self.max_sheets:
                halt_reason = HaltReason.SHEET_CAP
                logger.warning(
                    "Material '%s': sheet limit (%d) reached with %d instances unpacked",
                    material,
                    self.max_sheets,
                    len(remaining),
                )
                break

            placements = self.pack_sheet(remaining, sheet_size)
            if not placements:
                halt_reason = HaltReason.NO_PROGRESS
                logger.warning(
                    "Material '%s': no remaining instance fits on an empty %gx%g sheet "
                    "(%d unpacked)",
                    material,
                    sheet_size.width,
                    sheet_size.height,
                    len(remaining),
                )
                break

            sheets.append(
                PackedSheet(
                    material=material,
                    sheet_size=sheet_size,
                    placements=tuple(placements),
                )
            )
            logger.debug(
                "Material '%s' sheet %d: %d parts placed",
                material,
                len(sheets),
                len(placements),
            )
            remaining = [i for i in remaining if not i.packed]

        return MaterialPackingResult(
            material=material,
            sheet_size=sheet_size,
            sheets=tuple(sheets),
            unpacked=tuple(remaining),
            halt_reason=halt_reason,
        )

    def pack_sheet(
        self,
        instances: Sequence[PartInstance],
        sheet_size: SheetSize,
    ) -> list[PlacedPart]:
        """Place as many instances as possible on a single sheet.

        Every unpacked instance is attempted exactly once. Placed instances
        are marked ``packed``.

        Args:
            instances: Instances in packing order.
            sheet_size: Dimensions of the sheet.

        Returns:
            Placements in the order they were made.
        """
        state = _ShelfState()
        placements: list[PlacedPart] = []

        for instance in instances:
            if instance.packed:
                continue
            placement = self._find_placement(instance, state, sheet_size)
            if placement is None:
                continue
            instance.packed = True
            placements.append(placement)
            self._advance(state, placement)

        return placements

    def _candidates(
        self,
        instance: PartInstance,
        state: _ShelfState,
    ) -> Iterator[tuple[float, float, bool]]:
        """Yield ``(x, y, rotated)`` candidates in priority order."""
        options = legal_orientations(instance)
        if options.as_defined:
            yield state.cursor_x, state.cursor_y, False
            yield 0.0, state.next_row_y, False
        # Rotating a square is the same placement again
        if options.rotated and not instance.is_square:
            yield state.cursor_x, state.cursor_y, True
            yield 0.0, state.next_row_y, True

    def _find_placement(
        self,
        instance: PartInstance,
        state: _ShelfState,
        sheet_size: SheetSize,
    ) -> PlacedPart | None:
        for x, y, rotated in self._candidates(instance, state):
            if rotated:
                width, height = instance.original_height, instance.original_width
            else:
                width, height = instance.original_width, instance.original_height
            if self._fits(x, y, width, height, sheet_size):
                if rotated:
                    logger.debug(
                        "Instance '%s' placed rotated at (%g, %g)",
                        instance.instance_id,
                        x,
                        y,
                    )
                return PlacedPart(instance=instance, x=x, y=y, rotated=rotated)
        return None

    def _fits(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        sheet_size: SheetSize,
    ) -> bool:
        return (
            x + width + self.kerf <= sheet_size.width
            and y + height + self.kerf <= sheet_size.height
        )

    def _advance(self, state: _ShelfState, placement: PlacedPart) -> None:
        """Move the cursor past a placement."""
        width = placement.placed_width + self.kerf
        height = placement.placed_height + self.kerf
        if placement.y > state.cursor_y:
            # Placement opened a new row
            state.cursor_x = width
            state.cursor_y = placement.y
            state.row_max_height = height
        else:
            state.cursor_x += width
            state.row_max_height = max(state.row_max_height, height)


class LayoutAggregator:
    """Turns packed sheets into numbered layouts and a run summary.

    Attributes:
        kerf: Clearance included in bounding box and efficiency figures.
        max_sheets: Per-material sheet limit, quoted in messages.
    """

    def __init__(
        self,
        kerf: float = KERF,
        max_sheets: int = MAX_SHEETS_PER_MATERIAL,
    ) -> None:
        self.kerf = kerf
        self.max_sheets = max_sheets

    def close_sheet(self, sheet_id: int, sheet: PackedSheet) -> SheetLayout:
        """Compute the used bounding box and efficiency of a sheet."""
        kerf = self.kerf
        placements = sheet.placements
        used_width = max((p.right_edge + kerf for p in placements), default=0.0)
        used_height = max((p.bottom_edge + kerf for p in placements), default=0.0)
        part_area = sum(
            (p.instance.original_width + kerf) * (p.instance.original_height + kerf)
            for p in placements
        )
        efficiency = round(100 * part_area / sheet.sheet_size.area, 1)

        return SheetLayout(
            id=sheet_id,
            material=sheet.material,
            sheet_width=sheet.sheet_size.width,
            sheet_height=sheet.sheet_size.height,
            parts=placements,
            used_width=used_width,
            used_height=used_height,
            efficiency_percent=efficiency,
        )

    def aggregate(
        self,
        material_results: Sequence[MaterialPackingResult],
    ) -> NestingResult:
        """Fold per-material results into a single result.

        Sheets keep material group order and are numbered from 1 across
        the whole run.
        """
        layouts: list[SheetLayout] = []
        unpacked_ids: list[str] = []
        halt_reasons: dict[str, HaltReason] = {}
        total_instances = 0

        for result in material_results:
            for sheet in result.sheets:
                layouts.append(self.close_sheet(len(layouts) + 1, sheet))
            unpacked_ids.extend(i.instance_id for i in result.unpacked)
            halt_reasons[result.material] = result.halt_reason
            total_instances += result.total_instances

        total_unpacked = len(unpacked_ids)
        total_packed = total_instances - total_unpacked
        success = total_unpacked == 0

        return NestingResult(
            success=success,
            message=self._build_message(
                material_results, total_instances, total_packed, len(layouts)
            ),
            sheets=tuple(layouts),
            total_instances=total_instances,
            total_packed=total_packed,
            total_unpacked=total_unpacked,
            unpacked_ids=tuple(unpacked_ids),
            halt_reasons=halt_reasons,
        )

    def _build_message(
        self,
        material_results: Sequence[MaterialPackingResult],
        total_instances: int,
        total_packed: int,
        total_sheets: int,
    ) -> str:
        total_unpacked = total_instances - total_packed
        if total_unpacked == 0:
            return (
                f"Processed {total_instances} part instances onto "
                f"{total_sheets} sheets."
            )

        parts = [
            f"Packed {total_packed} of {total_instances} part instances onto "
            f"{total_sheets} sheets; {total_unpacked} could not be placed."
        ]
        for result in material_results:
            if result.halt_reason == HaltReason.SHEET_CAP:
                parts.append(
                    f"Max sheets ({self.max_sheets}) reached for material "
                    f"'{result.material}'."
                )
            elif result.halt_reason == HaltReason.NO_PROGRESS:
                largest = max(result.unpacked, key=lambda i: i.area)
                parts.append(
                    f"No remaining part fits on an empty sheet for material "
                    f"'{result.material}' (largest: {largest.name} "
                    f"{largest.original_width:g}x{largest.original_height:g})."
                )
        return " ".join(parts)


class NestingService:
    """Runs the full nesting pipeline.

    Material groups never share mutable state, so with ``max_workers > 1``
    they are packed on a thread pool. Results are merged in group order,
    so the output is identical to a sequential run.

    Attributes:
        config: Nesting configuration.
        packer: ShelfPacker used for every material group.
        aggregator: LayoutAggregator producing the final result.
    """

    def __init__(self, config: NestingConfig | None = None) -> None:
        self.config = config or NestingConfig()
        self.packer = ShelfPacker(
            kerf=self.config.kerf,
            max_sheets=self.config.max_sheets_per_material,
        )
        self.aggregator = LayoutAggregator(
            kerf=self.config.kerf,
            max_sheets=self.config.max_sheets_per_material,
        )

    def nest(
        self,
        specs: Iterable[PartSpec],
        sheet_sizes: SheetSizeConfig | Mapping[str, object] | None = None,
    ) -> NestingResult:
        """Pack part specs onto sheets.

        Args:
            specs: Part specs in input order.
            sheet_sizes: Sheet size per material, as a SheetSizeConfig or a
                plain ``{material: {"width": w, "height": h}}`` mapping.

        Returns:
            NestingResult; ``success`` is False when some instances could
            not be placed, but the partial layout is still returned.

        Raises:
            EmptyPartListError: If no specs are given.
            ValidationError: If specs or sheet sizes are malformed.
        """
        if not isinstance(sheet_sizes, SheetSizeConfig):
            sheet_sizes = SheetSizeConfig.from_mapping(
                sheet_sizes, default=self.config.default_sheet
            )

        instances = expand_parts(specs)
        groups = group_by_material(instances)

        logger.info(
            "Nesting %d part instances across %d material groups",
            len(instances),
            len(groups),
        )

        material_results = self._pack_groups(groups, sheet_sizes)
        result = self.aggregator.aggregate(material_results)

        logger.info(
            "Nesting finished: %d/%d instances packed on %d sheets",
            result.total_packed,
            result.total_instances,
            result.total_sheets,
        )
        return result

    def _pack_groups(
        self,
        groups: dict[str, list[PartInstance]],
        sheet_sizes: SheetSizeConfig,
    ) -> list[MaterialPackingResult]:
        jobs = [
            (material, instances, sheet_sizes.resolve(material))
            for material, instances in groups.items()
        ]

        if self.config.max_workers > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                return list(executor.map(lambda job: self.packer.pack_material(*job), jobs))

        return [self.packer.pack_material(*job) for job in jobs]

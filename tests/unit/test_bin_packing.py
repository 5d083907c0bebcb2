"""Tests for the shelf bin packing pipeline.

Tests cover:
- Part expansion, validation and instance naming
- Material grouping and packing order
- Row-by-row placement with kerf and grain rules
- Multi-sheet packing, halting and the sheet limit
- Layout numbering, efficiency and result messages
- Parallel packing of material groups
"""

from __future__ import annotations

from itertools import combinations

import pytest

from sheetnest.domain.entities import PartInstance, PlacedPart, PackedSheet
from sheetnest.domain.exceptions import EmptyPartListError, ValidationError
from sheetnest.domain.value_objects import (
    DEFAULT_MATERIAL,
    GrainDirection,
    HaltReason,
    PartSpec,
    SheetSize,
    SheetSizeConfig,
)
from sheetnest.infrastructure.bin_packing import (
    KERF,
    MAX_SHEETS_PER_MATERIAL,
    LayoutAggregator,
    NestingConfig,
    NestingService,
    ShelfPacker,
    expand_parts,
    group_by_material,
    sort_for_packing,
)
from sheetnest.infrastructure.formatters import result_to_dict


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def packer() -> ShelfPacker:
    """Create a packer with the default kerf and sheet limit."""
    return ShelfPacker()


@pytest.fixture
def service() -> NestingService:
    """Create a nesting service with default configuration."""
    return NestingService()


@pytest.fixture
def small_sheet() -> SheetSize:
    """A 1000 x 1000 mm sheet."""
    return SheetSize(width=1000, height=1000)


@pytest.fixture
def mixed_specs() -> list[PartSpec]:
    """A realistic mixed job across two materials."""
    return [
        PartSpec(name="Side", width=720, height=560, quantity=4, material="Plywood", grain="with"),
        PartSpec(name="Shelf", width=764, height=540, quantity=6, material="Plywood"),
        PartSpec(name="Back", width=800, height=720, quantity=2, material="MDF"),
        PartSpec(name="Kick", width=764, height=100, quantity=2, material="MDF", grain="reverse"),
        PartSpec(name="Spacer", width=150, height=150, quantity=5),
    ]


def make_instance(
    instance_id: str,
    width: float,
    height: float,
    grain: GrainDirection = GrainDirection.NONE,
    material: str = DEFAULT_MATERIAL,
) -> PartInstance:
    return PartInstance(
        instance_id=instance_id,
        name=instance_id.rsplit("_", 1)[0],
        original_width=width,
        original_height=height,
        material=material,
        grain=grain,
    )


def assert_no_overlap(placements: tuple[PlacedPart, ...], kerf: float) -> None:
    """Kerf-inflated rectangles on one sheet must not intersect."""
    for a, b in combinations(placements, 2):
        separated = (
            a.right_edge + kerf <= b.x
            or b.right_edge + kerf <= a.x
            or a.bottom_edge + kerf <= b.y
            or b.bottom_edge + kerf <= a.y
        )
        assert separated, f"{a.instance.instance_id} overlaps {b.instance.instance_id}"


# =============================================================================
# Configuration
# =============================================================================


class TestNestingConfig:
    """Tests for NestingConfig."""

    def test_defaults(self) -> None:
        config = NestingConfig()
        assert config.kerf == KERF == 3.0
        assert config.max_sheets_per_material == MAX_SHEETS_PER_MATERIAL == 50
        assert config.default_sheet == SheetSize(2440, 1220)
        assert config.max_workers == 1

    def test_rejects_negative_kerf(self) -> None:
        with pytest.raises(ValueError, match="Kerf must be non-negative"):
            NestingConfig(kerf=-1)

    def test_rejects_zero_sheet_limit(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            NestingConfig(max_sheets_per_material=0)

    def test_rejects_zero_workers(self) -> None:
        with pytest.raises(ValueError, match="Max workers must be at least 1"):
            NestingConfig(max_workers=0)


# =============================================================================
# Expansion, grouping and ordering
# =============================================================================


class TestExpandParts:
    """Tests for expand_parts."""

    def test_one_instance_per_unit(self) -> None:
        instances = expand_parts(
            [
                PartSpec(name="Shelf", width=500, height=300, quantity=3),
                PartSpec(name="Side", width=700, height=400, quantity=1, material="MDF"),
            ]
        )

        assert [i.instance_id for i in instances] == ["Shelf_1", "Shelf_2", "Shelf_3", "Side_1"]
        assert all(not i.packed for i in instances)
        assert instances[0].material == DEFAULT_MATERIAL
        assert instances[3].material == "MDF"

    def test_repeated_names_stay_unique(self) -> None:
        """Specs sharing a name get their position in the id."""
        instances = expand_parts(
            [
                PartSpec(name="Side", width=500, height=300, quantity=2),
                PartSpec(name="Side", width=700, height=400, quantity=1),
            ]
        )

        ids = [i.instance_id for i in instances]
        assert ids == ["Side#1_1", "Side#1_2", "Side#2_1"]
        assert all(i.name == "Side" for i in instances)

    def test_grain_is_parsed(self) -> None:
        instances = expand_parts(
            [PartSpec(name="Door", width=400, height=700, quantity=1, grain="WITH")]
        )
        assert instances[0].grain == GrainDirection.WITH

    def test_dimensions_become_floats(self) -> None:
        instances = expand_parts([PartSpec(name="A", width=400, height=700, quantity=1)])
        assert isinstance(instances[0].original_width, float)

    def test_empty_list_raises(self) -> None:
        with pytest.raises(EmptyPartListError, match="Nothing to pack"):
            expand_parts([])

    def test_invalid_specs_report_every_problem(self) -> None:
        """All malformed specs are reported and nothing is expanded."""
        specs = [
            PartSpec(name="Good", width=100, height=100, quantity=1),
            PartSpec(name="Bad", width=-5, height=100, quantity=1),
            PartSpec(name="Worse", width=100, height=100, quantity=0),
        ]

        with pytest.raises(ValidationError) as exc_info:
            expand_parts(specs)

        assert exc_info.value.errors == [
            "Part 2 ('Bad'): width must be a positive number (got -5)",
            "Part 3 ('Worse'): quantity must be a positive integer (got 0)",
        ]
        assert exc_info.value.offending == [specs[1], specs[2]]


class TestGroupByMaterial:
    """Tests for group_by_material."""

    def test_groups_in_first_appearance_order(self) -> None:
        instances = [
            make_instance("A_1", 10, 10, material="Oak"),
            make_instance("B_1", 10, 10, material="MDF"),
            make_instance("C_1", 10, 10, material="Oak"),
        ]

        groups = group_by_material(instances)

        assert list(groups) == ["Oak", "MDF"]
        assert [i.instance_id for i in groups["Oak"]] == ["A_1", "C_1"]


class TestSortForPacking:
    """Tests for sort_for_packing."""

    def test_tallest_first(self) -> None:
        instances = [
            make_instance("Short_1", 100, 100),
            make_instance("Tall_1", 100, 500),
        ]
        assert [i.instance_id for i in sort_for_packing(instances)] == ["Tall_1", "Short_1"]

    def test_width_breaks_height_ties(self) -> None:
        instances = [
            make_instance("Narrow_1", 100, 300),
            make_instance("Wide_1", 400, 300),
        ]
        assert [i.instance_id for i in sort_for_packing(instances)] == ["Wide_1", "Narrow_1"]

    def test_full_ties_keep_input_order(self) -> None:
        instances = [make_instance(f"P_{n}", 200, 200) for n in range(1, 5)]
        assert [i.instance_id for i in sort_for_packing(instances)] == [
            "P_1",
            "P_2",
            "P_3",
            "P_4",
        ]

    def test_reverse_grain_wide_part_sorts_by_width(self) -> None:
        """A wide REVERSE part is placed turned, so it ranks by its width."""
        instances = [
            make_instance("Panel_1", 400, 500),
            make_instance("Kick_1", 600, 100, GrainDirection.REVERSE),
        ]
        assert [i.instance_id for i in sort_for_packing(instances)] == ["Kick_1", "Panel_1"]


# =============================================================================
# ShelfPacker
# =============================================================================


class TestShelfPackerSheet:
    """Tests for placement on a single sheet."""

    def test_first_part_at_origin(self, packer: ShelfPacker, small_sheet: SheetSize) -> None:
        instance = make_instance("A_1", 500, 400)
        placements = packer.pack_sheet([instance], small_sheet)

        assert len(placements) == 1
        assert (placements[0].x, placements[0].y, placements[0].rotated) == (0.0, 0.0, False)
        assert instance.packed

    def test_row_advances_by_width_plus_kerf(
        self, packer: ShelfPacker, small_sheet: SheetSize
    ) -> None:
        """Three 300-wide parts share a row, the fourth opens a new one."""
        instances = [make_instance(f"P_{n}", 300, 200) for n in range(1, 5)]
        placements = packer.pack_sheet(instances, small_sheet)

        positions = [(p.x, p.y) for p in placements]
        assert positions == [(0.0, 0.0), (303.0, 0.0), (606.0, 0.0), (0.0, 203.0)]

    def test_new_row_starts_below_tallest_in_row(
        self, packer: ShelfPacker, small_sheet: SheetSize
    ) -> None:
        instances = [
            make_instance("Tall_1", 400, 300),
            make_instance("Short_1", 400, 100),
            make_instance("Next_1", 400, 100),
        ]
        placements = packer.pack_sheet(instances, small_sheet)

        assert (placements[2].x, placements[2].y) == (0.0, 303.0)

    def test_rotates_when_as_defined_does_not_fit(self, packer: ShelfPacker) -> None:
        """A 200x800 part fits a 1000x500 sheet only when turned."""
        instance = make_instance("Tall_1", 200, 800)
        placements = packer.pack_sheet([instance], SheetSize(1000, 500))

        assert len(placements) == 1
        assert placements[0].rotated
        assert (placements[0].placed_width, placements[0].placed_height) == (800, 200)

    def test_with_grain_never_rotates(self, packer: ShelfPacker) -> None:
        instance = make_instance("Tall_1", 200, 800, GrainDirection.WITH)
        placements = packer.pack_sheet([instance], SheetSize(1000, 500))

        assert placements == []
        assert not instance.packed

    def test_reverse_grain_always_rotates(
        self, packer: ShelfPacker, small_sheet: SheetSize
    ) -> None:
        """REVERSE parts are turned even when they would fit as defined."""
        instance = make_instance("Kick_1", 300, 100, GrainDirection.REVERSE)
        placements = packer.pack_sheet([instance], small_sheet)

        assert placements[0].rotated
        assert (placements[0].placed_width, placements[0].placed_height) == (100, 300)

    def test_kerf_counts_against_sheet_edge(self, packer: ShelfPacker) -> None:
        """A part exactly as large as the sheet leaves no room for the kerf."""
        instance = make_instance("Full_1", 1000, 1000)
        assert packer.pack_sheet([instance], SheetSize(1000, 1000)) == []
        assert packer.pack_sheet([instance], SheetSize(1003, 1003)) != []

    def test_zero_kerf_allows_exact_fit(self) -> None:
        packer = ShelfPacker(kerf=0)
        instance = make_instance("Full_1", 1000, 1000)
        assert len(packer.pack_sheet([instance], SheetSize(1000, 1000))) == 1

    def test_skips_already_packed(self, packer: ShelfPacker, small_sheet: SheetSize) -> None:
        instance = make_instance("A_1", 100, 100)
        instance.packed = True
        assert packer.pack_sheet([instance], small_sheet) == []


class TestShelfPackerMaterial:
    """Tests for packing a whole material group."""

    def test_single_part(self, packer: ShelfPacker) -> None:
        result = packer.pack_material("MDF", [make_instance("A_1", 500, 400)], SheetSize())

        assert result.halt_reason == HaltReason.COMPLETE
        assert len(result.sheets) == 1
        assert result.unpacked == ()
        assert result.packed_count == result.total_instances == 1

    def test_overflow_opens_new_sheet(self, packer: ShelfPacker, small_sheet: SheetSize) -> None:
        """Two 600x600 squares cannot share a 1000x1000 sheet."""
        instances = [make_instance("Sq_1", 600, 600), make_instance("Sq_2", 600, 600)]
        result = packer.pack_material("MDF", instances, small_sheet)

        assert result.halt_reason == HaltReason.COMPLETE
        assert len(result.sheets) == 2
        assert [len(s.placements) for s in result.sheets] == [1, 1]

    def test_unplaceable_part_halts_without_progress(self, packer: ShelfPacker) -> None:
        instance = make_instance("Tall_1", 200, 800, GrainDirection.WITH)
        result = packer.pack_material("MDF", [instance], SheetSize(1000, 500))

        assert result.halt_reason == HaltReason.NO_PROGRESS
        assert result.sheets == ()
        assert result.unpacked == (instance,)

    def test_unplaceable_part_does_not_block_others(self, packer: ShelfPacker) -> None:
        tall = make_instance("Tall_1", 200, 800, GrainDirection.WITH)
        small = make_instance("Small_1", 300, 200)
        result = packer.pack_material("MDF", [tall, small], SheetSize(1000, 500))

        assert result.halt_reason == HaltReason.NO_PROGRESS
        assert len(result.sheets) == 1
        assert result.sheets[0].placements[0].instance is small
        assert result.unpacked == (tall,)

    def test_sheet_limit(self) -> None:
        """Sixty 1x1 parts on 1x1 sheets with no kerf fill exactly 50 sheets."""
        packer = ShelfPacker(kerf=0)
        instances = [make_instance(f"Dot_{n}", 1, 1) for n in range(1, 61)]
        result = packer.pack_material("MDF", instances, SheetSize(1, 1))

        assert result.halt_reason == HaltReason.SHEET_CAP
        assert len(result.sheets) == 50
        assert len(result.unpacked) == 10

    def test_sheet_limit_is_configurable(self) -> None:
        packer = ShelfPacker(kerf=0, max_sheets=3)
        instances = [make_instance(f"Dot_{n}", 1, 1) for n in range(1, 6)]
        result = packer.pack_material("MDF", instances, SheetSize(1, 1))

        assert result.halt_reason == HaltReason.SHEET_CAP
        assert len(result.sheets) == 3
        assert [i.instance_id for i in result.unpacked] == ["Dot_4", "Dot_5"]

    def test_sheet_limit_case_with_default_kerf_makes_no_progress(self) -> None:
        """With kerf, a 1x1 part never fits a 1x1 sheet."""
        instances = [make_instance(f"Dot_{n}", 1, 1) for n in range(1, 61)]
        result = ShelfPacker().pack_material("MDF", instances, SheetSize(1, 1))

        assert result.halt_reason == HaltReason.NO_PROGRESS
        assert result.sheets == ()
        assert len(result.unpacked) == 60


# =============================================================================
# LayoutAggregator
# =============================================================================


class TestLayoutAggregator:
    """Tests for sheet closing and result aggregation."""

    def test_close_sheet_bounding_box_and_efficiency(self) -> None:
        placement = PlacedPart(instance=make_instance("A_1", 500, 400), x=0, y=0)
        sheet = PackedSheet(material="MDF", sheet_size=SheetSize(), placements=(placement,))

        layout = LayoutAggregator().close_sheet(7, sheet)

        assert layout.id == 7
        assert layout.used_width == 503
        assert layout.used_height == 403
        # 503 * 403 / (2440 * 1220) = 6.8%
        assert layout.efficiency_percent == 6.8

    def test_close_empty_sheet(self) -> None:
        sheet = PackedSheet(material="MDF", sheet_size=SheetSize(), placements=())
        layout = LayoutAggregator().close_sheet(1, sheet)

        assert layout.used_width == 0
        assert layout.used_height == 0
        assert layout.efficiency_percent == 0.0


# =============================================================================
# NestingService
# =============================================================================


class TestNestingService:
    """End-to-end tests for NestingService.nest."""

    def test_single_part(self, service: NestingService) -> None:
        result = service.nest([PartSpec(name="Panel", width=500, height=400, quantity=1)])

        assert result.success
        assert result.total_sheets == 1
        assert result.message == "Processed 1 part instances onto 1 sheets."
        layout = result.sheets[0]
        assert layout.id == 1
        assert layout.material == DEFAULT_MATERIAL
        assert (layout.sheet_width, layout.sheet_height) == (2440, 1220)
        assert layout.efficiency_percent == 6.8

    def test_two_squares_overflow(self, service: NestingService) -> None:
        result = service.nest(
            [PartSpec(name="Square", width=600, height=600, quantity=2)],
            {DEFAULT_MATERIAL: {"width": 1000, "height": 1000}},
        )

        assert result.success
        assert [s.id for s in result.sheets] == [1, 2]
        assert result.halt_reasons == {DEFAULT_MATERIAL: HaltReason.COMPLETE}

    def test_grain_locked_part_cannot_fit(self, service: NestingService) -> None:
        result = service.nest(
            [PartSpec(name="Tall", width=200, height=800, quantity=1, grain="with")],
            {DEFAULT_MATERIAL: {"width": 1000, "height": 500}},
        )

        assert not result.success
        assert result.total_sheets == 0
        assert result.unpacked_ids == ("Tall_1",)
        assert result.halt_reasons == {DEFAULT_MATERIAL: HaltReason.NO_PROGRESS}
        assert result.message == (
            "Packed 0 of 1 part instances onto 0 sheets; 1 could not be placed. "
            "No remaining part fits on an empty sheet for material "
            "'Default_Material' (largest: Tall 200x800)."
        )

    def test_same_part_without_grain_rotates(self, service: NestingService) -> None:
        result = service.nest(
            [PartSpec(name="Tall", width=200, height=800, quantity=1)],
            {DEFAULT_MATERIAL: {"width": 1000, "height": 500}},
        )

        assert result.success
        assert result.sheets[0].parts[0].rotated

    def test_sheet_limit_message(self) -> None:
        service = NestingService(NestingConfig(kerf=0, default_sheet=SheetSize(1, 1)))
        result = service.nest([PartSpec(name="Dot", width=1, height=1, quantity=60)])

        assert not result.success
        assert result.total_sheets == 50
        assert result.total_unpacked == 10
        assert result.halt_reasons[DEFAULT_MATERIAL] == HaltReason.SHEET_CAP
        assert "Max sheets (50) reached for material 'Default_Material'." in result.message

    def test_materials_use_their_own_sheet_size(self, service: NestingService) -> None:
        result = service.nest(
            [
                PartSpec(name="A", width=500, height=400, quantity=1, material="Oak"),
                PartSpec(name="B", width=500, height=400, quantity=1, material="MDF"),
            ],
            {"Oak": {"width": 600, "height": 600}},
        )

        sizes = {s.material: (s.sheet_width, s.sheet_height) for s in result.sheets}
        assert sizes == {"Oak": (600, 600), "MDF": (2440, 1220)}

    def test_sheet_ids_span_materials(
        self, service: NestingService, mixed_specs: list[PartSpec]
    ) -> None:
        """Sheets are numbered from 1 across the run in material order."""
        result = service.nest(mixed_specs, {"MDF": {"width": 1000, "height": 1000}})

        assert [s.id for s in result.sheets] == list(range(1, result.total_sheets + 1))
        materials = [s.material for s in result.sheets]
        assert list(dict.fromkeys(materials)) == ["Plywood", "MDF", DEFAULT_MATERIAL]

    def test_malformed_sheet_sizes_raise(self, service: NestingService) -> None:
        with pytest.raises(ValidationError, match="'width' must be positive"):
            service.nest(
                [PartSpec(name="A", width=10, height=10, quantity=1)],
                {"MDF": {"width": 0, "height": 10}},
            )

    def test_empty_part_list_raises(self, service: NestingService) -> None:
        with pytest.raises(EmptyPartListError):
            service.nest([])


class TestNestingInvariants:
    """Properties every nesting result must satisfy."""

    @pytest.fixture
    def result(self, service: NestingService, mixed_specs: list[PartSpec]):
        return service.nest(mixed_specs, {"MDF": {"width": 1000, "height": 1000}})

    def test_no_overlap(self, result) -> None:
        for sheet in result.sheets:
            assert_no_overlap(sheet.parts, KERF)

    def test_within_sheet_bounds(self, result) -> None:
        for sheet in result.sheets:
            for p in sheet.parts:
                assert p.x >= 0 and p.y >= 0
                assert p.right_edge + KERF <= sheet.sheet_width
                assert p.bottom_edge + KERF <= sheet.sheet_height

    def test_every_instance_accounted_for_once(
        self, result, mixed_specs: list[PartSpec]
    ) -> None:
        placed = [p.instance.instance_id for s in result.sheets for p in s.parts]
        all_ids = placed + list(result.unpacked_ids)

        assert len(all_ids) == len(set(all_ids))
        assert len(all_ids) == sum(spec.quantity for spec in mixed_specs)
        assert result.total_packed + result.total_unpacked == result.total_instances

    def test_single_material_per_sheet(self, result) -> None:
        for sheet in result.sheets:
            assert {p.instance.material for p in sheet.parts} == {sheet.material}

    def test_grain_respected(self, result) -> None:
        for sheet in result.sheets:
            for p in sheet.parts:
                if p.instance.is_square:
                    continue
                if p.instance.grain == GrainDirection.WITH:
                    assert not p.rotated
                elif p.instance.grain == GrainDirection.REVERSE:
                    assert p.rotated

    def test_efficiency_matches_placements(self, result) -> None:
        for sheet in result.sheets:
            area = sum(
                (p.instance.original_width + KERF) * (p.instance.original_height + KERF)
                for p in sheet.parts
            )
            expected = round(100 * area / (sheet.sheet_width * sheet.sheet_height), 1)
            assert sheet.efficiency_percent == expected


class TestDeterminism:
    """Repeated and parallel runs produce identical output."""

    def test_repeated_runs_are_identical(self, mixed_specs: list[PartSpec]) -> None:
        first = NestingService().nest(mixed_specs)
        second = NestingService().nest(mixed_specs)
        assert result_to_dict(first) == result_to_dict(second)

    def test_parallel_matches_sequential(self, mixed_specs: list[PartSpec]) -> None:
        sizes = {"MDF": {"width": 1000, "height": 1000}}
        sequential = NestingService(NestingConfig(max_workers=1)).nest(mixed_specs, sizes)
        parallel = NestingService(NestingConfig(max_workers=4)).nest(mixed_specs, sizes)

        assert result_to_dict(parallel) == result_to_dict(sequential)

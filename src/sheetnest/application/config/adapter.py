"""Adapters from pydantic job configuration to domain objects."""

from sheetnest.application.config.schema import (
    NestingJobConfiguration,
    NestingOptionsSchema,
)
from sheetnest.domain.value_objects import PartSpec, SheetSize, SheetSizeConfig
from sheetnest.infrastructure.bin_packing import NestingConfig


def config_to_part_specs(config: NestingJobConfiguration) -> list[PartSpec]:
    """Convert configured parts to domain PartSpecs, preserving order."""
    return [
        PartSpec(
            name=part.name,
            width=part.width,
            height=part.height,
            quantity=part.quantity,
            material=part.material,
            grain=part.grain,
        )
        for part in config.parts
    ]


def config_to_sheet_sizes(config: NestingJobConfiguration) -> SheetSizeConfig:
    """Convert configured sheet sizes, including the default sheet."""
    default = config.options.default_sheet
    return SheetSizeConfig(
        sizes={
            material: SheetSize(width=size.width, height=size.height)
            for material, size in config.sheet_sizes.items()
        },
        default=SheetSize(width=default.width, height=default.height),
    )


def config_to_nesting_config(options: NestingOptionsSchema | None) -> NestingConfig:
    """Convert packing options to a NestingConfig.

    Returns the default config if options is None.
    """
    if options is None:
        return NestingConfig()

    return NestingConfig(
        kerf=options.kerf,
        max_sheets_per_material=options.max_sheets_per_material,
        default_sheet=SheetSize(
            width=options.default_sheet.width,
            height=options.default_sheet.height,
        ),
        max_workers=options.max_workers,
    )

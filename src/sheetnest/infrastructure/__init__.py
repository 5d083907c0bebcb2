"""Infrastructure layer - packing engine, renderers and exporters."""

from .bin_packing import (
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
from .cut_diagram_renderer import CutDiagramRenderer
from .formatters import CutListCsvFormatter, JsonResultFormatter, result_to_dict
from .exporters import ExporterRegistry, ExportManager

__all__ = [
    "KERF",
    "MAX_SHEETS_PER_MATERIAL",
    "CutDiagramRenderer",
    "CutListCsvFormatter",
    "ExportManager",
    "ExporterRegistry",
    "JsonResultFormatter",
    "LayoutAggregator",
    "NestingConfig",
    "NestingService",
    "ShelfPacker",
    "expand_parts",
    "group_by_material",
    "result_to_dict",
    "sort_for_packing",
]

"""Plain-data and text formatters for nesting results."""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from sheetnest.domain.entities import NestingResult, PlacedPart, SheetLayout


def placed_part_to_dict(placement: PlacedPart) -> dict[str, Any]:
    """Convert a placement to its plain-data form."""
    instance = placement.instance
    return {
        "id": instance.instance_id,
        "name": instance.name,
        "material": instance.material,
        "grain": instance.grain.value,
        "x": placement.x,
        "y": placement.y,
        "original_width": instance.original_width,
        "original_height": instance.original_height,
        "placed_width": placement.placed_width,
        "placed_height": placement.placed_height,
        "rotated": placement.rotated,
    }


def sheet_layout_to_dict(layout: SheetLayout) -> dict[str, Any]:
    """Convert a sheet layout to its plain-data form."""
    return {
        "id": layout.id,
        "material": layout.material,
        "sheet_width": layout.sheet_width,
        "sheet_height": layout.sheet_height,
        "used_width": layout.used_width,
        "used_height": layout.used_height,
        "efficiency_percent": layout.efficiency_percent,
        "parts": [placed_part_to_dict(p) for p in layout.parts],
    }


def result_to_dict(result: NestingResult) -> dict[str, Any]:
    """Convert a nesting result to the document handed to presentation layers."""
    return {
        "success": result.success,
        "message": result.message,
        "total_instances": result.total_instances,
        "total_packed": result.total_packed,
        "total_unpacked": result.total_unpacked,
        "total_sheets": result.total_sheets,
        "unpacked_ids": list(result.unpacked_ids),
        "halt_reasons": {
            material: reason.value for material, reason in result.halt_reasons.items()
        },
        "sheets": [sheet_layout_to_dict(sheet) for sheet in result.sheets],
    }


class JsonResultFormatter:
    """Formats a nesting result as JSON."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def format(self, result: NestingResult) -> str:
        indent = self.indent if self.indent > 0 else None
        return json.dumps(result_to_dict(result), indent=indent)


def _format_length(value: float) -> str:
    """Format a length for the cut list without losing precision."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class CutListCsvFormatter:
    """Formats placed parts as a CSV cut list for desktop cutting software.

    One row per placed part, in sheet order then placement order.
    """

    HEADER = [
        "Sheet",
        "Material",
        "Part ID",
        "Part Name",
        "X",
        "Y",
        "Placed Width",
        "Placed Height",
        "Original Width",
        "Original Height",
        "Rotated",
    ]

    def format(self, result: NestingResult) -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(self.HEADER)

        for sheet in result.sheets:
            for placement in sheet.parts:
                instance = placement.instance
                writer.writerow(
                    [
                        sheet.id,
                        sheet.material,
                        instance.instance_id,
                        instance.name,
                        _format_length(placement.x),
                        _format_length(placement.y),
                        _format_length(placement.placed_width),
                        _format_length(placement.placed_height),
                        _format_length(instance.original_width),
                        _format_length(instance.original_height),
                        "yes" if placement.rotated else "no",
                    ]
                )

        return output.getvalue()

"""ASCII cut diagrams and text summaries for nesting results."""

from __future__ import annotations

from sheetnest.domain.entities import NestingResult, PlacedPart, SheetLayout


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class CutDiagramRenderer:
    """Renders sheet layouts for terminal display.

    Attributes:
        width: Diagram width in characters, borders included.
        min_height: Minimum number of grid rows per sheet.
    """

    def __init__(self, width: int = 80, min_height: int = 10) -> None:
        if width < 10:
            raise ValueError("Diagram width must be at least 10 characters")
        self.width = width
        self.min_height = min_height

    def render_ascii(self, layout: SheetLayout, total_sheets: int = 1) -> str:
        """Generate an ASCII cut diagram for a single sheet.

        Args:
            layout: Sheet layout to draw.
            total_sheets: Total number of sheets (for the header).

        Returns:
            Multi-line diagram with a header line.
        """
        # Reserve 2 chars for borders
        grid_width = self.width - 2
        scale_x = grid_width / layout.sheet_width

        # Terminal cells are roughly twice as tall as they are wide
        aspect_ratio = layout.sheet_height / layout.sheet_width
        grid_height = max(int(grid_width * aspect_ratio * 0.5), self.min_height)
        scale_y = grid_height / layout.sheet_height

        grid = [[" " for _ in range(grid_width)] for _ in range(grid_height)]
        for placement in layout.parts:
            self._draw_part(grid, placement, scale_x, scale_y)

        lines = [
            f"Sheet {layout.id} of {total_sheets} - {layout.material} "
            f"{layout.sheet_width:g}x{layout.sheet_height:g} - "
            f"{_plural(layout.part_count, 'part')}, "
            f"{layout.efficiency_percent:.1f}% efficiency",
            "+" + "-" * grid_width + "+",
        ]
        lines.extend("|" + "".join(row) + "|" for row in grid)
        lines.append("+" + "-" * grid_width + "+")
        return "\n".join(lines)

    def _draw_part(
        self,
        grid: list[list[str]],
        placement: PlacedPart,
        scale_x: float,
        scale_y: float,
    ) -> None:
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid else 0

        x1 = min(int(placement.x * scale_x), grid_width - 1)
        y1 = min(int(placement.y * scale_y), grid_height - 1)
        x2 = min(int(placement.right_edge * scale_x), grid_width - 1)
        y2 = min(int(placement.bottom_edge * scale_y), grid_height - 1)

        for x in range(x1, x2 + 1):
            grid[y1][x] = "-"
            grid[y2][x] = "-"
        for y in range(y1, y2 + 1):
            grid[y][x1] = "|"
            grid[y][x2] = "|"
        for x, y in ((x1, y1), (x2, y1), (x1, y2), (x2, y2)):
            grid[y][x] = "+"

        # Label and dimensions inside the box when there is room
        inner_width = x2 - x1 - 1
        dims = f"{placement.placed_width:g}x{placement.placed_height:g}"
        if placement.rotated:
            dims += "R"
        for row, text in ((y1 + 1, placement.instance.instance_id), (y1 + 2, dims)):
            if row >= y2 or inner_width <= 0:
                continue
            for i, char in enumerate(text[:inner_width]):
                grid[row][x1 + 1 + i] = char

    def render_all_ascii(self, result: NestingResult) -> str:
        """Generate ASCII cut diagrams for every sheet followed by a summary."""
        if not result.sheets:
            return "No sheets to display.\n\n" + self.render_summary(result)

        parts: list[str] = []
        for layout in result.sheets:
            parts.append(self.render_ascii(layout, result.total_sheets))
            parts.append("")
        parts.append(self.render_summary(result))
        return "\n".join(parts)

    def render_summary(self, result: NestingResult) -> str:
        """Generate a text summary of sheet usage and unplaced parts."""
        lines: list[str] = [
            "NESTING SUMMARY",
            "=" * 40,
            f"Status: {'complete' if result.success else 'partial'}",
            f"Instances: {result.total_packed} packed, "
            f"{result.total_unpacked} unpacked of {result.total_instances}",
            f"Total Sheets: {result.total_sheets}",
            f"Overall Efficiency: {result.overall_efficiency_percent:.1f}%",
        ]

        if result.sheets:
            lines.append("")
            lines.append("Sheets by Material:")
            for material, count in result.sheets_by_material.items():
                lines.append(f"  {material}: {_plural(count, 'sheet')}")

            lines.append("")
            lines.append("Per-Sheet Details:")
            for layout in result.sheets:
                lines.append(
                    f"  Sheet {layout.id}: {_plural(layout.part_count, 'part')}, "
                    f"{layout.efficiency_percent:.1f}% efficiency ({layout.material})"
                )

        if result.unpacked_ids:
            lines.append("")
            lines.append(f"Unpacked Instances: {len(result.unpacked_ids)}")
            for instance_id in result.unpacked_ids:
                lines.append(f"  {instance_id}")

        lines.append("")
        lines.append(result.message)
        return "\n".join(lines)

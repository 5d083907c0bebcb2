"""Plain-text exporter: ASCII cut diagrams plus summary."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from sheetnest.infrastructure.cut_diagram_renderer import CutDiagramRenderer
from sheetnest.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from sheetnest.domain.entities import NestingResult


@ExporterRegistry.register("text")
class TextDiagramExporter:
    """Exports ASCII diagrams of every sheet."""

    format_name: ClassVar[str] = "text"
    file_extension: ClassVar[str] = "txt"

    def __init__(self, width: int = 100) -> None:
        self.renderer = CutDiagramRenderer(width=width)

    def export(self, result: NestingResult, path: Path) -> None:
        path.write_text(self.export_string(result), encoding="utf-8")

    def export_string(self, result: NestingResult) -> str:
        return self.renderer.render_all_ascii(result) + "\n"

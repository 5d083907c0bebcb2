"""CSV cut list exporter for desktop cutting software."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from sheetnest.infrastructure.exporters.base import ExporterRegistry
from sheetnest.infrastructure.formatters import CutListCsvFormatter

if TYPE_CHECKING:
    from sheetnest.domain.entities import NestingResult


@ExporterRegistry.register("csv")
class CutListCsvExporter:
    """Exports one CSV row per placed part."""

    format_name: ClassVar[str] = "csv"
    file_extension: ClassVar[str] = "csv"

    def __init__(self) -> None:
        self.formatter = CutListCsvFormatter()

    def export(self, result: NestingResult, path: Path) -> None:
        path.write_text(self.export_string(result), encoding="utf-8", newline="")

    def export_string(self, result: NestingResult) -> str:
        return self.formatter.format(result)

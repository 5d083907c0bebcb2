"""JSON exporter for nesting results."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from sheetnest.infrastructure.exporters.base import ExporterRegistry
from sheetnest.infrastructure.formatters import JsonResultFormatter

if TYPE_CHECKING:
    from sheetnest.domain.entities import NestingResult


@ExporterRegistry.register("json")
class JsonResultExporter:
    """Exports the full result document: summary counts, sheets and placements."""

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, indent: int = 2) -> None:
        self.formatter = JsonResultFormatter(indent=indent)

    def export(self, result: NestingResult, path: Path) -> None:
        path.write_text(self.export_string(result), encoding="utf-8")

    def export_string(self, result: NestingResult) -> str:
        return self.formatter.format(result)

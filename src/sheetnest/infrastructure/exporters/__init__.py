"""Exporter framework for nesting results.

Importing this package registers the built-in exporters:
- json: Full result document
- csv: Cut list, one row per placed part
- text: ASCII cut diagrams with summary
"""

from sheetnest.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
)
from sheetnest.infrastructure.exporters.csv_exporter import CutListCsvExporter
from sheetnest.infrastructure.exporters.json_exporter import JsonResultExporter
from sheetnest.infrastructure.exporters.text_exporter import TextDiagramExporter

__all__ = [
    "CutListCsvExporter",
    "Exporter",
    "ExportManager",
    "ExporterRegistry",
    "JsonResultExporter",
    "TextDiagramExporter",
]

"""Output handling functions for the nesting CLI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer

from sheetnest.infrastructure.cut_diagram_renderer import CutDiagramRenderer
from sheetnest.infrastructure.exporters import ExporterRegistry, ExportManager
from sheetnest.infrastructure.formatters import CutListCsvFormatter, JsonResultFormatter

if TYPE_CHECKING:
    from sheetnest.domain.entities import NestingResult

__all__ = [
    "echo_result",
    "export_result_files",
    "parse_output_formats",
]


def parse_output_formats(output_formats_str: str) -> list[str]:
    """Parse a comma-separated format list or "all".

    Raises:
        typer.Exit: If any format is unknown.
    """
    available = ExporterRegistry.available_formats()
    if output_formats_str.strip().lower() == "all":
        return available

    formats = [f.strip().lower() for f in output_formats_str.split(",") if f.strip()]
    invalid = [f for f in formats if f not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)
    return formats


def echo_result(result: NestingResult, output_format: str, width: int = 80) -> None:
    """Print a nesting result to stdout in the requested format."""
    if output_format == "json":
        typer.echo(JsonResultFormatter().format(result))
    elif output_format == "csv":
        typer.echo(CutListCsvFormatter().format(result), nl=False)
    elif output_format == "summary":
        typer.echo(CutDiagramRenderer(width=width).render_summary(result))
    else:
        typer.echo(CutDiagramRenderer(width=width).render_all_ascii(result))


def export_result_files(
    formats: list[str],
    output_dir: Path | None,
    project_name: str,
    result: NestingResult,
) -> dict[str, Path]:
    """Write a result to files, one per format, and list them on stderr.

    Raises:
        typer.Exit: If writing fails.
    """
    manager = ExportManager(output_dir or Path("."))
    try:
        files = manager.export_all(formats, result, project_name)
    except OSError as e:
        typer.echo(f"Export error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo("Exported files:", err=True)
    for fmt, path in files.items():
        typer.echo(f"  {fmt.upper()}: {path}", err=True)
    return files

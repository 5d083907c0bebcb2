"""Nest command: pack the parts of a job file onto sheets."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer

from sheetnest.application.commands import NestPartsCommand
from sheetnest.application.config import (
    ConfigError,
    load_config,
    merge_config_with_cli,
)
from sheetnest.cli.commands.output_handlers import (
    echo_result,
    export_result_files,
    parse_output_formats,
)
from sheetnest.cli.commands.validate import display_load_error


class OutputFormatChoice(str, Enum):
    TEXT = "text"
    SUMMARY = "summary"
    JSON = "json"
    CSV = "csv"


def nest_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to a JSON job file or a JSON array of parts"),
    ],
    output_format: Annotated[
        Optional[OutputFormatChoice],
        typer.Option("--format", "-f", help="Format printed to stdout"),
    ] = None,
    kerf: Annotated[
        Optional[float],
        typer.Option("--kerf", "-k", min=0, help="Kerf allowance in mm"),
    ] = None,
    max_sheets: Annotated[
        Optional[int],
        typer.Option("--max-sheets", min=1, help="Maximum sheets per material"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", min=1, help="Material groups packed concurrently"),
    ] = None,
    output_formats: Annotated[
        Optional[str],
        typer.Option(
            "--output-formats",
            help="Comma-separated formats to write as files (json,csv,text) or 'all'",
        ),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for exported files"),
    ] = None,
    project_name: Annotated[
        Optional[str],
        typer.Option("--project-name", help="Base name for exported files"),
    ] = None,
    width: Annotated[
        int,
        typer.Option("--width", min=20, help="Diagram width in characters"),
    ] = 80,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Pack the parts of a job file onto sheets.

    Exit codes:
        0 - Every part instance was placed
        1 - The job file or its parts are invalid
        2 - Some part instances could not be placed (partial layout)

    Example:
        sheetnest nest job.json --format summary --output-formats json,csv
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    export_formats = parse_output_formats(output_formats) if output_formats else None
    try:
        config = merge_config_with_cli(
            config,
            kerf=kerf,
            max_sheets=max_sheets,
            max_workers=workers,
            output_format=output_format.value if output_format is not None else None,
            output_formats=export_formats,
            output_dir=output_dir,
            project_name=project_name,
        )
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    output = NestPartsCommand().execute(config)
    if not output.is_valid:
        typer.echo("Errors:", err=True)
        for error in output.errors:
            typer.echo(f"  {error}", err=True)
        raise typer.Exit(code=1)

    result = output.result
    echo_result(result, config.output.format, width=width)

    if config.output.formats:
        formats = config.output.formats
        if "all" in formats:
            formats = parse_output_formats("all")
        export_dir = Path(config.output.output_dir) if config.output.output_dir else None
        export_result_files(formats, export_dir, config.output.project_name, result)

    raise typer.Exit(code=0 if result.success else 2)

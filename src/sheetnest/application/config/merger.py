"""Configuration merging utilities for CLI override support.

Precedence: CLI args > config values > defaults. Only non-None CLI
arguments override configuration values.
"""

from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from sheetnest.application.config.loader import config_error_from_validation
from sheetnest.application.config.schema import NestingJobConfiguration


def merge_config_with_cli(
    config: NestingJobConfiguration,
    *,
    kerf: float | None = None,
    max_sheets: int | None = None,
    max_workers: int | None = None,
    output_format: str | None = None,
    output_formats: list[str] | None = None,
    output_dir: str | Path | None = None,
    project_name: str | None = None,
) -> NestingJobConfiguration:
    """Merge CLI arguments with configuration values.

    Args:
        config: The base job configuration
        kerf: Override for options.kerf
        max_sheets: Override for options.max_sheets_per_material
        max_workers: Override for options.max_workers
        output_format: Override for output.format
        output_formats: Override for output.formats
        output_dir: Override for output.output_dir
        project_name: Override for output.project_name

    Returns:
        A new, re-validated NestingJobConfiguration

    Raises:
        ConfigError: If an override is out of range for the schema.

    Example:
        >>> merged = merge_config_with_cli(config, kerf=4.0)
        >>> merged.options.kerf
        4.0
    """
    options_data = _build_options_data(config, kerf, max_sheets, max_workers)
    output_data = _build_output_data(
        config, output_format, output_formats, output_dir, project_name
    )

    try:
        return NestingJobConfiguration.model_validate(
            {
                "schema_version": config.schema_version,
                "parts": config.parts,
                "sheet_sizes": config.sheet_sizes,
                "options": options_data,
                "output": output_data,
            }
        )
    except PydanticValidationError as e:
        raise config_error_from_validation(e) from e


def _build_options_data(
    config: NestingJobConfiguration,
    kerf: float | None,
    max_sheets: int | None,
    max_workers: int | None,
) -> dict[str, Any]:
    options = config.options
    return {
        "kerf": kerf if kerf is not None else options.kerf,
        "max_sheets_per_material": (
            max_sheets if max_sheets is not None else options.max_sheets_per_material
        ),
        "max_workers": max_workers if max_workers is not None else options.max_workers,
        "default_sheet": options.default_sheet.model_dump(),
    }


def _build_output_data(
    config: NestingJobConfiguration,
    output_format: str | None,
    output_formats: list[str] | None,
    output_dir: str | Path | None,
    project_name: str | None,
) -> dict[str, Any]:
    output = config.output
    output_data: dict[str, Any] = {
        "format": output_format if output_format is not None else output.format,
        "formats": output_formats if output_formats is not None else output.formats,
        "project_name": project_name if project_name is not None else output.project_name,
    }

    if output_dir is not None:
        output_data["output_dir"] = str(output_dir)
    elif output.output_dir is not None:
        output_data["output_dir"] = output.output_dir

    return output_data

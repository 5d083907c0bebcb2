"""Configuration loader with comprehensive error handling.

Loads nesting jobs from JSON files, dictionaries, or the two serialized
text parameters (part list and sheet sizes) used by form-based callers.
File system errors, JSON parse errors and pydantic validation errors are
all reported as ConfigError with actionable messages.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from sheetnest.application.config.schema import NestingJobConfiguration


class ConfigError(Exception):
    """Exception raised for configuration-related errors.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, json_parse, validation, ...)
        path: Path to the configuration file (if applicable)
        details: Additional details (line/column for JSON, validation errors, etc.)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a JSON path string.

    Examples:
        >>> _format_json_path(("options", "kerf"))
        'options.kerf'
        >>> _format_json_path(("parts", 0, "width"))
        'parts[0].width'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": _format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def _format_validation_error_message(details: list[dict[str, Any]]) -> str:
    lines = ["Configuration validation failed:"]
    for detail in details:
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {detail['path']}: {detail['message']} (got: {value!r})")
        else:
            lines.append(f"  - {detail['path']}: {detail['message']}")
    return "\n".join(lines)


def config_error_from_validation(
    error: PydanticValidationError, path: Path | None = None
) -> ConfigError:
    """Wrap a pydantic validation error as a ConfigError with JSON paths."""
    details = _extract_validation_errors(error)
    return ConfigError(
        message=_format_validation_error_message(details),
        error_type="validation",
        path=path,
        details=details,
    )


def _validate(data: Any, path: Path | None = None) -> NestingJobConfiguration:
    try:
        return NestingJobConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise config_error_from_validation(e, path) from e


def _parse_json(content: str, source: str, path: Path | None = None) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in {source} (line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e


def load_config(path: Path) -> NestingJobConfiguration:
    """Load and validate a nesting job from a JSON file.

    Args:
        path: Path to the JSON job file

    Returns:
        A validated NestingJobConfiguration

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
            ``error_type`` is one of file_not_found, permission_denied,
            file_read_error, json_parse or validation.
    """
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        ) from e
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    data = _parse_json(content, f"config file: {path}", path)
    return _validate(data, path)


def load_config_from_dict(data: dict[str, Any] | list[Any]) -> NestingJobConfiguration:
    """Load and validate a nesting job from already-parsed data.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(data)


def load_config_from_text(
    parts_text: str,
    sheet_sizes_text: str | None = None,
) -> NestingJobConfiguration:
    """Load a nesting job from serialized part list and sheet sizes.

    Args:
        parts_text: JSON array of part records.
        sheet_sizes_text: Optional JSON object mapping material to
            ``{"width": w, "height": h}``.

    Raises:
        ConfigError: If either text is not valid JSON of the right shape.
    """
    parts = _parse_json(parts_text, "part list")
    if not isinstance(parts, list):
        raise ConfigError(
            message="Part list must be a JSON array",
            error_type="validation",
            details=[{"path": "parts", "message": "Input should be a valid list"}],
        )

    data: dict[str, Any] = {"parts": parts}
    if sheet_sizes_text is not None and sheet_sizes_text.strip():
        sheet_sizes = _parse_json(sheet_sizes_text, "sheet sizes")
        if not isinstance(sheet_sizes, dict):
            raise ConfigError(
                message="Sheet sizes must be a JSON object keyed by material",
                error_type="validation",
                details=[
                    {"path": "sheet_sizes", "message": "Input should be a valid dictionary"}
                ],
            )
        data["sheet_sizes"] = sheet_sizes

    return _validate(data)

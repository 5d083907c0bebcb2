"""Job configuration: schemas, loading, CLI merging and domain adapters."""

from sheetnest.application.config.adapter import (
    config_to_nesting_config,
    config_to_part_specs,
    config_to_sheet_sizes,
)
from sheetnest.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
    load_config_from_text,
)
from sheetnest.application.config.merger import merge_config_with_cli
from sheetnest.application.config.schema import (
    SUPPORTED_VERSIONS,
    NestingJobConfiguration,
    NestingOptionsSchema,
    OutputConfig,
    PartSpecSchema,
    SheetSizeSchema,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "ConfigError",
    "NestingJobConfiguration",
    "NestingOptionsSchema",
    "OutputConfig",
    "PartSpecSchema",
    "SheetSizeSchema",
    "config_to_nesting_config",
    "config_to_part_specs",
    "config_to_sheet_sizes",
    "load_config",
    "load_config_from_dict",
    "load_config_from_text",
    "merge_config_with_cli",
]

"""Pydantic schemas for nesting job configuration files.

A job file holds the part list, per-material sheet sizes, packing options
and output settings. All models reject unknown fields so typos surface as
validation errors.
"""

from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from sheetnest.domain.value_objects import (
    DEFAULT_SHEET_HEIGHT,
    DEFAULT_SHEET_WIDTH,
    GrainDirection,
)

# Supported schema versions for job configuration files
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})

OutputFormat = Literal["text", "summary", "json", "csv"]


class PartSpecSchema(BaseModel):
    """A rectangular part with quantity, material and grain.

    ``qty`` is accepted as an alias of ``quantity``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(..., min_length=1, description="Part name")
    width: float = Field(..., gt=0, allow_inf_nan=False, description="Part width in mm")
    height: float = Field(..., gt=0, allow_inf_nan=False, description="Part height in mm")
    quantity: int = Field(..., gt=0, alias="qty", description="Number of units")
    material: str | None = Field(
        default=None, description="Material key (default material when omitted)"
    )
    grain: GrainDirection = Field(
        default=GrainDirection.NONE, description="Grain direction: with, reverse or none"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Part name must not be blank")
        return v

    @field_validator("grain", mode="before")
    @classmethod
    def parse_grain(cls, v: Any) -> GrainDirection:
        """Accept grain values in any case; null means no constraint."""
        return GrainDirection.parse(v)


class SheetSizeSchema(BaseModel):
    """Stock sheet dimensions in mm."""

    model_config = ConfigDict(extra="forbid")

    width: float = Field(
        default=DEFAULT_SHEET_WIDTH, gt=0, allow_inf_nan=False, description="Sheet width in mm"
    )
    height: float = Field(
        default=DEFAULT_SHEET_HEIGHT, gt=0, allow_inf_nan=False, description="Sheet height in mm"
    )


class NestingOptionsSchema(BaseModel):
    """Packing options.

    Attributes:
        kerf: Clearance added to both dimensions of every part.
        max_sheets_per_material: Safety bound on sheets opened per material.
        default_sheet: Sheet size for materials without an explicit entry.
        max_workers: Material groups packed concurrently.
    """

    model_config = ConfigDict(extra="forbid")

    kerf: float = Field(default=3.0, ge=0, le=50, description="Kerf allowance in mm")
    max_sheets_per_material: int = Field(
        default=50, ge=1, le=1000, description="Maximum sheets per material"
    )
    default_sheet: SheetSizeSchema = Field(default_factory=SheetSizeSchema)
    max_workers: int = Field(default=1, ge=1, le=64, description="Worker threads")


class OutputConfig(BaseModel):
    """Output format and file settings.

    Attributes:
        format: Format printed to stdout by the CLI.
        formats: Formats written as files (json, csv, text).
        output_dir: Directory for exported files.
        project_name: Base name for exported files.
    """

    model_config = ConfigDict(extra="forbid")

    format: OutputFormat = "text"
    formats: list[str] = Field(default_factory=list)
    output_dir: str | None = None
    project_name: str = Field(default="nesting", min_length=1)

    @field_validator("formats")
    @classmethod
    def validate_formats(cls, v: list[str]) -> list[str]:
        valid_formats = {"json", "csv", "text"}
        invalid = set(v) - valid_formats - {"all"}
        if invalid:
            raise ValueError(
                f"Invalid formats: {sorted(invalid)}. Valid formats: {sorted(valid_formats)}"
            )
        return v


class NestingJobConfiguration(BaseModel):
    """Root model for a nesting job file.

    A bare JSON array is accepted and treated as the part list.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = "1.0"
    parts: list[PartSpecSchema] = Field(default_factory=list)
    sheet_sizes: dict[str, SheetSizeSchema] = Field(default_factory=dict)
    options: NestingOptionsSchema = Field(default_factory=NestingOptionsSchema)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode="before")
    @classmethod
    def wrap_part_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"parts": data}
        return data

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported schema version '{v}'. "
                f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
            )
        return v

    @property
    def total_quantity(self) -> int:
        return sum(part.quantity for part in self.parts)

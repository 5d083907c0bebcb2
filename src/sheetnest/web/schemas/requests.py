"""Pydantic request schemas for the REST API."""

from pydantic import BaseModel, ConfigDict, Field

from sheetnest.application.config.schema import (
    NestingOptionsSchema,
    PartSpecSchema,
    SheetSizeSchema,
)


class NestRequest(BaseModel):
    """Request for nesting a part list."""

    model_config = ConfigDict(extra="forbid")

    parts: list[PartSpecSchema] = Field(..., description="Parts to pack")
    sheet_sizes: dict[str, SheetSizeSchema] = Field(
        default_factory=dict, description="Sheet size per material"
    )
    options: NestingOptionsSchema = Field(
        default_factory=NestingOptionsSchema, description="Packing options"
    )


class NestTextRequest(BaseModel):
    """Request carrying the part list and sheet sizes as serialized JSON text."""

    parts_data: str = Field(..., description="JSON array of part records")
    sheet_sizes_data: str | None = Field(
        default=None, description="JSON object mapping material to sheet size"
    )


class ConfigValidateRequest(BaseModel):
    """Request for validating a job configuration."""

    config: dict | list = Field(..., description="Nesting job configuration JSON")

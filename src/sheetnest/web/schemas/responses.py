"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class PlacedPartSchema(BaseModel):
    """A part placed on a sheet."""

    id: str = Field(..., description="Instance identifier")
    name: str = Field(..., description="Part name")
    material: str = Field(..., description="Material key")
    grain: str = Field(..., description="Grain direction")
    x: float = Field(..., description="Left offset on the sheet in mm")
    y: float = Field(..., description="Top offset on the sheet in mm")
    original_width: float = Field(..., description="Width as specified")
    original_height: float = Field(..., description="Height as specified")
    placed_width: float = Field(..., description="Width as placed")
    placed_height: float = Field(..., description="Height as placed")
    rotated: bool = Field(..., description="True if turned 90 degrees")


class SheetLayoutSchema(BaseModel):
    """Layout of one sheet."""

    id: int = Field(..., description="Sheet number, unique across the run")
    material: str = Field(..., description="Material key")
    sheet_width: float = Field(..., description="Nominal sheet width in mm")
    sheet_height: float = Field(..., description="Nominal sheet height in mm")
    used_width: float = Field(..., description="Bounding box width, kerf included")
    used_height: float = Field(..., description="Bounding box height, kerf included")
    efficiency_percent: float = Field(..., description="Sheet utilization")
    parts: list[PlacedPartSchema] = Field(default_factory=list)


class NestingResultSchema(BaseModel):
    """Response for a nesting run."""

    success: bool = Field(..., description="True when every instance was placed")
    message: str = Field(..., description="Human-readable summary")
    total_instances: int
    total_packed: int
    total_unpacked: int
    total_sheets: int
    unpacked_ids: list[str] = Field(default_factory=list)
    halt_reasons: dict[str, str] = Field(
        default_factory=dict, description="Why packing stopped, per material"
    )
    sheets: list[SheetLayoutSchema] = Field(default_factory=list)


class ValidationResultSchema(BaseModel):
    """Response for configuration validation."""

    is_valid: bool = Field(..., description="Whether configuration is valid")
    errors: list[dict[str, Any]] = Field(default_factory=list)
    total_instances: int = Field(default=0, description="Part instances in the job")

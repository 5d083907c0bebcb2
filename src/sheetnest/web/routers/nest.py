"""Nesting endpoints."""

from fastapi import APIRouter

from sheetnest.application.config import (
    NestingJobConfiguration,
    load_config_from_text,
)
from sheetnest.application.dtos import NestingOutput
from sheetnest.infrastructure.formatters import result_to_dict
from sheetnest.web.dependencies import NestCommandDep
from sheetnest.web.exceptions import NestingInputError
from sheetnest.web.schemas.requests import NestRequest, NestTextRequest
from sheetnest.web.schemas.responses import NestingResultSchema

router = APIRouter(prefix="/nest", tags=["nest"])


def _output_to_schema(output: NestingOutput) -> NestingResultSchema:
    """Convert NestingOutput to the response schema.

    Raises:
        NestingInputError: If the engine rejected the input.
    """
    if not output.is_valid:
        raise NestingInputError(output.errors, output.error_type or "validation")
    return NestingResultSchema.model_validate(result_to_dict(output.result))


@router.post("", response_model=NestingResultSchema)
def nest_parts(request: NestRequest, command: NestCommandDep) -> NestingResultSchema:
    """Pack a part list onto sheets.

    A partial layout (some parts unplaced) is returned with
    ``success=false``; only malformed input is rejected.
    """
    config = NestingJobConfiguration(
        parts=request.parts,
        sheet_sizes=request.sheet_sizes,
        options=request.options,
    )
    return _output_to_schema(command.execute(config))


@router.post("/text", response_model=NestingResultSchema)
def nest_parts_from_text(
    request: NestTextRequest, command: NestCommandDep
) -> NestingResultSchema:
    """Pack a part list given as serialized JSON text.

    Raises:
        ConfigError: If either text is not valid JSON of the right shape.
    """
    config = load_config_from_text(request.parts_data, request.sheet_sizes_data)
    return _output_to_schema(command.execute(config))

"""Job configuration validation endpoints."""

from fastapi import APIRouter

from sheetnest.application.config import ConfigError, load_config_from_dict
from sheetnest.web.schemas.requests import ConfigValidateRequest
from sheetnest.web.schemas.responses import ValidationResultSchema

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidationResultSchema)
def validate_configuration(request: ConfigValidateRequest) -> ValidationResultSchema:
    """Validate a nesting job configuration without packing it."""
    try:
        config = load_config_from_dict(request.config)
    except ConfigError as e:
        return ValidationResultSchema(
            is_valid=False,
            errors=[{"path": d.get("path"), "message": d.get("message")} for d in e.details],
        )

    return ValidationResultSchema(is_valid=True, total_instances=config.total_quantity)

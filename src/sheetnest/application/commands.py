"""Application commands."""

from __future__ import annotations

import logging

from sheetnest.application.config import (
    NestingJobConfiguration,
    config_to_nesting_config,
    config_to_part_specs,
    config_to_sheet_sizes,
)
from sheetnest.application.dtos import NestingOutput
from sheetnest.application.factory import ServiceFactory, get_factory
from sheetnest.domain.exceptions import EmptyPartListError, ValidationError

logger = logging.getLogger(__name__)


class NestPartsCommand:
    """Command to nest the parts of a job configuration onto sheets.

    Structural input errors are returned as ``errors`` on the output and no
    packing is attempted. A run that cannot place every part is still a
    valid output whose result has ``success=False``.
    """

    def __init__(self, factory: ServiceFactory | None = None) -> None:
        self.factory = factory or get_factory()

    def execute(self, config: NestingJobConfiguration) -> NestingOutput:
        """Execute the nesting command.

        Args:
            config: Validated job configuration.

        Returns:
            NestingOutput with the result or validation errors.
        """
        service = self.factory.create_nesting_service(
            config_to_nesting_config(config.options)
        )

        try:
            result = service.nest(
                config_to_part_specs(config),
                config_to_sheet_sizes(config),
            )
        except EmptyPartListError as e:
            return NestingOutput(errors=e.errors, error_type="empty_part_list")
        except ValidationError as e:
            logger.info("Nesting input rejected: %s", e)
            return NestingOutput(errors=e.errors, error_type="validation")

        return NestingOutput(result=result)

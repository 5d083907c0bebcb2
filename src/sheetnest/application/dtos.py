"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from sheetnest.domain.entities import NestingResult


@dataclass
class NestingOutput:
    """Output DTO for a nesting command.

    Attributes:
        result: The nesting result, or None when the input was rejected.
        errors: Validation error messages if the input was rejected.
        error_type: "empty_part_list" or "validation" when rejected.
    """

    result: NestingResult | None = None
    errors: list[str] = field(default_factory=list)
    error_type: str | None = None

    @property
    def is_valid(self) -> bool:
        """True when the input was accepted and a result was produced."""
        return not self.errors and self.result is not None

    @property
    def is_complete(self) -> bool:
        """True when every part instance was placed."""
        return self.is_valid and self.result.success

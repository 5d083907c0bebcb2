"""Exceptions raised by the nesting engine.

Only structural input problems are exceptions. A packing run that cannot
place every part still returns a result (with ``success=False``) so the
caller can render whatever was achievable.
"""

from __future__ import annotations

from typing import Any, Sequence


class NestingError(Exception):
    """Base class for nesting engine errors."""

    pass


class ValidationError(NestingError):
    """Raised when part specs or sheet sizes are malformed.

    Attributes:
        errors: Human-readable description of every violated constraint.
        offending: The input records that failed validation.
    """

    def __init__(
        self,
        errors: Sequence[str],
        offending: Sequence[Any] | None = None,
    ) -> None:
        self.errors = list(errors)
        self.offending = list(offending or [])
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if len(self.errors) == 1:
            return self.errors[0]
        lines = [f"{len(self.errors)} validation errors:"]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)


class EmptyPartListError(ValidationError):
    """Raised when there is nothing to pack."""

    def __init__(self) -> None:
        super().__init__(["Nothing to pack: the part list is empty"])

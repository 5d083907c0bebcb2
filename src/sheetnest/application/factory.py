"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sheetnest.infrastructure.bin_packing import NestingConfig, NestingService

if TYPE_CHECKING:
    from sheetnest.application.commands import NestPartsCommand


@dataclass
class ServiceFactory:
    """Factory for creating service instances.

    Attributes:
        default_config: Nesting configuration used when a caller gives none.
    """

    default_config: NestingConfig | None = None

    def create_nesting_service(self, config: NestingConfig | None = None) -> NestingService:
        """Create a NestingService for one run."""
        return NestingService(config or self.default_config or NestingConfig())

    def create_nest_command(self) -> NestPartsCommand:
        """Create a NestPartsCommand wired to this factory."""
        from sheetnest.application.commands import NestPartsCommand

        return NestPartsCommand(factory=self)


# Default factory instance
_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None

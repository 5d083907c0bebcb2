"""FastAPI dependency injection for nesting services."""

from typing import Annotated

from fastapi import Depends

from sheetnest.application.commands import NestPartsCommand
from sheetnest.application.factory import ServiceFactory, get_factory


def get_service_factory() -> ServiceFactory:
    """Get the current default ServiceFactory."""
    return get_factory()


def get_nest_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> NestPartsCommand:
    """Dependency for NestPartsCommand."""
    return factory.create_nest_command()


NestCommandDep = Annotated[NestPartsCommand, Depends(get_nest_command)]

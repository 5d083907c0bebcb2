"""Application layer - commands, DTOs and job configuration."""

from sheetnest.application.commands import NestPartsCommand
from sheetnest.application.dtos import NestingOutput
from sheetnest.application.factory import ServiceFactory, get_factory

__all__ = [
    "NestPartsCommand",
    "NestingOutput",
    "ServiceFactory",
    "get_factory",
]

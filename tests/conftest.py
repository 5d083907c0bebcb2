"""Pytest configuration and shared fixtures for nesting tests."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterator

import pytest

if TYPE_CHECKING:
    from sheetnest.application.commands import NestPartsCommand


FIXTURES_PATH = Path(__file__).parent / "fixtures" / "configs"


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_service_factory() -> Iterator[None]:
    """Give every test a fresh default service factory."""
    from sheetnest.application.factory import reset_factory

    reset_factory()
    yield
    reset_factory()


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding the JSON job fixtures."""
    return FIXTURES_PATH


@pytest.fixture
def nest_command() -> "NestPartsCommand":
    """Create a NestPartsCommand using the default factory."""
    from sheetnest.application.factory import get_factory

    return get_factory().create_nest_command()

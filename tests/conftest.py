"""Shared fixtures for the restriction pipeline tests."""

import pytest

from airspace.spatial.kernel import GeometryKernel
from tests.helpers import SAN_FRANCISCO


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def kernel():
    """Geometry kernel with default configuration."""
    return GeometryKernel()


@pytest.fixture
def center():
    return SAN_FRANCISCO


@pytest.fixture
def search_area(kernel, center):
    """One-mile search disk around San Francisco."""
    return kernel.buffer(center, 1.0)

"""Shared pytest fixtures for the vida_lib test suite.

Fixtures:
    grid: 48x48 pixel grid covering [-3, 3] x [-3, 3]
    flat_image: Constant image of value 1.0 on grid
    disk_alpha: Edge width used to synthesise disk_image
    disk_image: GaussDisk(disk_alpha) rendered on grid
    rng: Seeded numpy Generator

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
    integration: Mark test as integration test
"""

import numpy as np
import pytest

from vida_lib.templates import GaussDisk
from vida_lib.utils.rendering import ImageGrid, render


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow-running (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture
def grid():
    """Square grid wide enough for unit-frame templates."""
    return ImageGrid(fov_x=6.0, fov_y=6.0, nx=48, ny=48)


@pytest.fixture
def flat_image(grid):
    """Image of constant value 1.0."""
    return np.ones(grid.shape)


@pytest.fixture
def disk_alpha():
    return 0.3


@pytest.fixture
def disk_image(grid, disk_alpha):
    """Synthetic disk with a known edge width."""
    return render(GaussDisk(disk_alpha), grid)


@pytest.fixture
def rng():
    return np.random.default_rng(20240601)

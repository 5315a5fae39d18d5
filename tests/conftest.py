"""
Pytest configuration and fixtures for sandpile tests.
"""

import pytest

from sandpile.config import Config
from sandpile.grid import Grid, create_random_grid
from sandpile.parallel import ParallelUpdater


@pytest.fixture
def small_config() -> Config:
    """Small grid for fast tests."""
    return Config(width=16, height=12, strategy="branchless", initial_grains=64)


@pytest.fixture
def random_grid() -> Grid:
    """Random grid with values in [0, 400]."""
    return create_random_grid(40, 30, high=400, seed=345234)


@pytest.fixture
def center_grid() -> Grid:
    """3x3 grid with a single toppling cell in the middle."""
    grid = Grid(3, 3)
    grid[1, 1] = 4
    return grid


@pytest.fixture
def corner_grid() -> Grid:
    """3x3 grid with a single toppling cell in the top-left corner."""
    grid = Grid(3, 3)
    grid[0, 0] = 4
    return grid


@pytest.fixture
def updater():
    """Parallel updater with a private pool."""
    with ParallelUpdater(workers=3) as u:
        yield u

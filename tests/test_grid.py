"""
Tests for the sandpile grid.
"""

import numpy as np
import pytest

from sandpile.config import Config
from sandpile.grid import Grid, create_initial_grid, create_random_grid


class TestGrid:
    """Tests for Grid construction and buffers."""

    def test_buffers_zero_filled(self):
        """Both buffers have width * height zeroed cells."""
        grid = Grid(7, 5)

        assert grid.cells.shape == (35,)
        assert grid.previous.shape == (35,)
        assert not grid.cells.any()
        assert not grid.previous.any()
        assert grid.cells.dtype == np.uint32

    def test_shape_and_rows(self):
        """Rows view is [H, W] and shares memory with cells."""
        grid = Grid(4, 3)
        grid.rows[2, 1] = 9

        assert grid.shape == (3, 4)
        assert grid.cells[2 * 4 + 1] == 9

    def test_empty_grid(self):
        """A 0x0 grid is valid."""
        grid = Grid(0, 0)

        assert grid.size == 0
        assert grid.total() == 0
        assert grid.is_stable()

    def test_invalid_dimensions(self):
        """Negative dimensions are rejected."""
        with pytest.raises(ValueError, match="width"):
            Grid(-1, 3)
        with pytest.raises(ValueError, match="height"):
            Grid(3, -1)

    def test_from_array(self):
        """from_array keeps row-major layout."""
        grid = Grid.from_array([[1, 2, 3], [4, 5, 6]])

        assert grid.width == 3
        assert grid.height == 2
        assert grid.cells.tolist() == [1, 2, 3, 4, 5, 6]
        assert grid[2, 1] == 6

    def test_from_array_rejects_1d(self):
        """from_array needs a 2-D input."""
        with pytest.raises(ValueError, match="2-D"):
            Grid.from_array([1, 2, 3])

    def test_from_array_rejects_overflow(self):
        """Counts too large for the count type are rejected, not wrapped."""
        with pytest.raises(ValueError, match="<="):
            Grid.from_array(np.array([[2**32 + 5, 1]], dtype=np.int64))

    def test_from_array_rejects_fractions(self):
        """Non-integer counts are rejected, not truncated."""
        with pytest.raises(ValueError, match="integers"):
            Grid.from_array([[2**32 + 5, 4.9]])
        with pytest.raises(ValueError, match="integers"):
            Grid.from_array([[1.0, 2.0]])

    def test_from_array_accepts_max_count(self):
        """The largest representable count is kept exactly."""
        limit = np.iinfo(np.uint32).max

        assert Grid.from_array([[limit]])[0] == limit

    def test_snapshot_swaps_buffers(self):
        """snapshot reuses storage: the live buffer becomes the snapshot."""
        grid = Grid.from_array([[1, 2], [3, 4]])
        live = grid.cells
        spare = grid.previous

        grid.snapshot()

        assert grid.previous is live
        assert grid.cells is spare
        np.testing.assert_array_equal(grid.cells, grid.previous)

    def test_copy_is_independent(self):
        """Copies do not share buffers."""
        grid = Grid.from_array([[1, 2], [3, 4]])
        clone = grid.copy()
        clone[0] = 100

        assert grid[0] == 1
        assert clone != grid

    def test_equality(self):
        """Grids compare by dimensions and live cells."""
        assert Grid.from_array([[1, 2]]) == Grid.from_array([[1, 2]])
        assert Grid.from_array([[1, 2]]) != Grid.from_array([[1], [2]])

    def test_str(self):
        """str renders one line per row."""
        grid = Grid.from_array([[0, 1], [2, 3]])

        assert str(grid) == "0, 1\n2, 3"

    def test_total_and_unstable(self):
        """Grain totals and unstable cells are counted."""
        grid = Grid.from_array([[0, 4], [9, 3]])

        assert grid.total() == 16
        assert grid.unstable_count() == 2
        assert not grid.is_stable()


class TestCoordinates:
    """Tests for index/coordinate mapping."""

    def test_to_coords(self):
        """Flat indices map to (x, y)."""
        grid = Grid(10, 10)

        assert grid.to_coords(11) == (1, 1)
        assert grid.to_coords(10) == (0, 1)
        assert grid.to_coords(9) == (9, 0)

    def test_roundtrip(self):
        """to_coords inverts from_coords on every cell."""
        grid = Grid(7, 4)

        for y in range(grid.height):
            for x in range(grid.width):
                assert grid.to_coords(grid.from_coords(x, y)) == (x, y)

    def test_from_coords_checked(self):
        """Checked mapping rejects both axes out of range."""
        grid = Grid(4, 3)

        assert grid.from_coords_checked(3, 2) == 11
        assert grid.from_coords_checked(4, 0) is None
        assert grid.from_coords_checked(0, 3) is None
        assert grid.from_coords_checked(-1, 0) is None


class TestAccess:
    """Tests for checked and unchecked cell access."""

    def test_get_in_range(self):
        """get returns the count as an int."""
        grid = Grid(3, 2)
        grid[2, 1] = 7

        assert grid.get(2, 1) == 7
        assert isinstance(grid.get(2, 1), int)

    def test_get_out_of_range(self):
        """get returns None off the grid on either axis."""
        grid = Grid(3, 2)

        assert grid.get(3, 0) is None
        assert grid.get(0, 2) is None
        assert grid.get(-1, 0) is None

    def test_set_and_add(self):
        """set and add report whether the cell exists."""
        grid = Grid(3, 2)

        assert grid.set(1, 1, 5)
        assert grid.add(1, 1, 2)
        assert grid.get(1, 1) == 7
        assert not grid.set(3, 1, 5)
        assert not grid.add(1, 2, 5)
        assert grid.total() == 7

    def test_flat_index_checked(self):
        """get_index and set_index reject indices outside [0, size)."""
        grid = Grid(3, 2)

        assert grid.set_index(5, 8)
        assert grid.get_index(5) == 8
        assert grid.get(2, 1) == 8
        assert grid.get_index(6) is None
        assert grid.get_index(-1) is None
        assert not grid.set_index(6, 1)
        assert not grid.set_index(-1, 1)
        assert grid.total() == 8

    def test_unchecked_index(self):
        """Flat and (x, y) indexing address the same cell."""
        grid = Grid(4, 4)
        grid[6] = 3

        assert grid[2, 1] == 3

    def test_unchecked_out_of_buffer(self):
        """Unchecked access past the buffer raises IndexError."""
        grid = Grid(3, 3)

        with pytest.raises(IndexError):
            grid[9]
        with pytest.raises(IndexError):
            grid[0, 3] = 1
        with pytest.raises(IndexError):
            grid[-1]


class TestFactories:
    """Tests for grid factories."""

    def test_random_grid_range(self):
        """Random counts lie in [0, high]."""
        grid = create_random_grid(20, 20, high=5, seed=1)

        assert grid.cells.max() <= 5
        assert grid.cells.min() >= 0

    def test_random_grid_reproducible(self):
        """Same seed produces the same grid."""
        assert create_random_grid(8, 8, seed=3) == create_random_grid(8, 8, seed=3)
        assert create_random_grid(8, 8, seed=3) != create_random_grid(8, 8, seed=4)

    def test_center_mode(self):
        """Center mode drops all grains on the middle cell."""
        config = Config(width=11, height=9, init_mode="center", initial_grains=123)
        grid = create_initial_grid(config)

        assert grid.get(5, 4) == 123
        assert grid.total() == 123

    def test_empty_mode(self):
        """Empty mode starts with no grains."""
        grid = create_initial_grid(Config(width=5, height=5, init_mode="empty"))

        assert grid.total() == 0

    def test_random_mode(self):
        """Random mode honours random_max."""
        config = Config(width=10, height=10, init_mode="random", random_max=3)
        grid = create_initial_grid(config, seed=0)

        assert grid.cells.max() <= 3

"""
Grid representation and initialization for the sandpile.

The grid holds two flat, row-major count buffers of equal length:
- cells: the live state, mutated by updates and by seeding
- previous: snapshot of the prior state, only read during an update
"""

from typing import Optional, Union

import numpy as np

from .config import Config


# A cell topples once it holds this many grains (one per cardinal neighbor)
THRESHOLD = 4

Key = Union[int, tuple[int, int]]


class Grid:
    """
    Dense rectangular sandpile grid with a double buffer.

    Cell (x, y) lives at flat index y * width + x in both buffers.

    Attributes:
        width: Number of columns
        height: Number of rows
        cells: Live grain counts [width * height]
        previous: Snapshot buffer used by update strategies [width * height]
    """

    def __init__(self, width: int, height: int, dtype: np.dtype = np.uint32):
        if not isinstance(width, (int, np.integer)) or width < 0:
            raise ValueError(f"width must be a non-negative integer, got {width!r}")
        if not isinstance(height, (int, np.integer)) or height < 0:
            raise ValueError(f"height must be a non-negative integer, got {height!r}")

        self.width = int(width)
        self.height = int(height)
        self.cells = np.zeros(self.width * self.height, dtype=dtype)
        self.previous = np.zeros(self.width * self.height, dtype=dtype)

    @classmethod
    def from_array(cls, values, dtype: np.dtype = np.uint32) -> "Grid":
        """
        Create a grid from a 2-D array-like of shape [height, width].

        Args:
            values: Initial grain counts, rows first
            dtype: Unsigned count type

        Returns:
            Grid whose live cells equal values
        """
        array = np.asarray(values)
        if array.ndim != 2:
            raise ValueError(f"values must be 2-D, got shape {array.shape}")

        if array.size:
            if not np.issubdtype(array.dtype, np.integer):
                raise ValueError(f"grain counts must be integers, got dtype {array.dtype}")
            if array.min() < 0:
                raise ValueError("grain counts must be non-negative")
            limit = np.iinfo(dtype).max
            if array.max() > limit:
                raise ValueError(f"grain counts must be <= {limit}, got {array.max()}")

        height, width = array.shape
        grid = cls(width, height, dtype=dtype)
        grid.cells[:] = array.ravel()
        return grid

    @property
    def shape(self) -> tuple[int, int]:
        """Grid dimensions (H, W)."""
        return (self.height, self.width)

    @property
    def size(self) -> int:
        """Number of cells."""
        return self.width * self.height

    @property
    def rows(self) -> np.ndarray:
        """Live cells as a [H, W] view."""
        return self.cells.reshape(self.height, self.width)

    @property
    def previous_rows(self) -> np.ndarray:
        """Snapshot buffer as a [H, W] view."""
        return self.previous.reshape(self.height, self.width)

    def to_coords(self, index: int) -> tuple[int, int]:
        """Map a flat index to (x, y)."""
        return (index % self.width, index // self.width)

    def from_coords(self, x: int, y: int) -> int:
        """Map (x, y) to a flat index without bounds checking."""
        return y * self.width + x

    def from_coords_checked(self, x: int, y: int) -> Optional[int]:
        """Map (x, y) to a flat index, or None when outside the grid."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        return None

    def get(self, x: int, y: int) -> Optional[int]:
        """Grain count at (x, y), or None when outside the grid."""
        index = self.from_coords_checked(x, y)
        if index is None:
            return None
        return int(self.cells[index])

    def get_index(self, index: int) -> Optional[int]:
        """Grain count at a flat index, or None outside [0, size)."""
        if 0 <= index < self.cells.size:
            return int(self.cells[index])
        return None

    def set_index(self, index: int, value: int) -> bool:
        """Set the count at a flat index. Returns False outside [0, size)."""
        if 0 <= index < self.cells.size:
            self.cells[index] = value
            return True
        return False

    def set(self, x: int, y: int, value: int) -> bool:
        """Set the count at (x, y). Returns False when outside the grid."""
        index = self.from_coords_checked(x, y)
        if index is None:
            return False
        self.cells[index] = value
        return True

    def add(self, x: int, y: int, amount: int) -> bool:
        """Add grains at (x, y). Returns False when outside the grid."""
        index = self.from_coords_checked(x, y)
        if index is None:
            return False
        self.cells[index] += amount
        return True

    def _flat_index(self, key: Key) -> int:
        if isinstance(key, tuple):
            x, y = key
            index = self.from_coords(x, y)
        else:
            index = key
        # Negative indices would silently wrap in numpy
        if not 0 <= index < self.cells.size:
            raise IndexError(f"cell {key!r} out of range for {self.width}x{self.height} grid")
        return index

    def __getitem__(self, key: Key) -> int:
        return int(self.cells[self._flat_index(key)])

    def __setitem__(self, key: Key, value: int) -> None:
        self.cells[self._flat_index(key)] = value

    def snapshot(self) -> None:
        """
        Start an update: previous becomes the current state and cells a copy of it.

        The buffers swap roles and the old snapshot's storage is reused for the
        new live state, so no allocation happens per step.
        """
        self.cells, self.previous = self.previous, self.cells
        np.copyto(self.cells, self.previous)

    def total(self) -> int:
        """Total number of grains on the grid."""
        return int(self.cells.sum(dtype=np.uint64))

    def unstable_count(self) -> int:
        """Number of cells at or above the toppling threshold."""
        return int(np.count_nonzero(self.cells >= THRESHOLD))

    def is_stable(self) -> bool:
        """True when no cell would topple on the next update."""
        return not bool(np.any(self.cells >= THRESHOLD))

    def copy(self) -> "Grid":
        """Create a deep copy of the grid, both buffers included."""
        clone = Grid(self.width, self.height, dtype=self.cells.dtype)
        clone.cells[:] = self.cells
        clone.previous[:] = self.previous
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.cells, other.cells)
        )

    def __str__(self) -> str:
        return "\n".join(", ".join(str(c) for c in row) for row in self.rows.tolist())

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, grains={self.total()})"


def create_random_grid(
    width: int,
    height: int,
    high: int = 400,
    seed: Optional[int] = None,
) -> Grid:
    """
    Create a grid with uniformly random grain counts.

    Args:
        width: Number of columns
        height: Number of rows
        high: Inclusive upper bound for each cell
        seed: Random seed for reproducibility

    Returns:
        Grid with counts drawn from [0, high]
    """
    rng = np.random.default_rng(seed)
    grid = Grid(width, height)
    grid.cells[:] = rng.integers(0, high, size=grid.size, endpoint=True)
    return grid


def create_initial_grid(config: Config, seed: Optional[int] = None) -> Grid:
    """
    Create the starting grid for a simulation.

    Args:
        config: Simulation configuration
        seed: Random seed, only used in "random" mode

    Returns:
        Grid laid out according to config.init_mode
    """
    if config.init_mode == "random":
        return create_random_grid(config.width, config.height, config.random_max, seed)

    grid = Grid(config.width, config.height)
    if config.init_mode == "center":
        x, y = config.center
        grid[x, y] = config.initial_grains
    return grid

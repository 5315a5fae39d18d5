"""
Scalar toppling update strategies.

All strategies compute the same step: every cell holding at least THRESHOLD
grains in the snapshot loses THRESHOLD grains and gives one to each existing
cardinal neighbor. Grains sent off the grid are lost. A cell topples at most
once per step, whatever its count.
"""

from numba import njit

from .grid import Grid, THRESHOLD
from .passes import BRANCHLESS, CONDITIONAL, apply_passes


@njit(nogil=True)
def topple_cells(previous, cells, width, height):
    """Topple every cell of the snapshot, one index at a time."""
    for i in range(previous.shape[0]):
        if previous[i] >= THRESHOLD:
            x = i % width
            y = i // width
            if x > 0:
                cells[i - 1] += 1
            if x + 1 < width:
                cells[i + 1] += 1
            if y > 0:
                cells[i - width] += 1
            if y + 1 < height:
                cells[i + width] += 1
            cells[i] -= THRESHOLD


def update_reference(grid: Grid) -> None:
    """
    Reference step: visit cells one by one and check each neighbor explicitly.

    Simple enough to verify by inspection.

    Args:
        grid: Grid updated in place
    """
    grid.snapshot()
    topple_cells(grid.previous, grid.cells, grid.width, grid.height)


def update_iter(grid: Grid) -> None:
    """
    Optimized step: five whole-grid sweeps with masked (conditional) writes.

    Args:
        grid: Grid updated in place
    """
    grid.snapshot()
    apply_passes(grid.rows, grid.previous_rows, CONDITIONAL)


def update_branchless(grid: Grid) -> None:
    """
    Branchless step: the five sweeps of update_iter, with every increment and
    decrement scaled by a 0/1 toppling predicate instead of masked.

    Args:
        grid: Grid updated in place
    """
    grid.snapshot()
    apply_passes(grid.rows, grid.previous_rows, BRANCHLESS)

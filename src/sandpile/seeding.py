"""
Grain seeding through the grid's checked access.

Used by interactive drawing and initial layouts; off-grid points are skipped.
"""

from .grid import Grid


def drop_grains(grid: Grid, x: int, y: int, amount: int) -> bool:
    """
    Add grains to a single cell.

    Args:
        grid: Target grid
        x: Column
        y: Row
        amount: Grains to add

    Returns:
        True if the cell exists
    """
    return grid.add(x, y, amount)


def put_line(grid: Grid, x1: int, y1: int, x2: int, y2: int, increment: int = 10) -> int:
    """
    Add grains along the segment (x1, y1)-(x2, y2) using Bresenham rasterization.

    Both end points are included. Pixels falling outside the grid are skipped.

    Args:
        grid: Target grid
        x1, y1: Start point
        x2, y2: End point
        increment: Grains added to each rasterized cell

    Returns:
        Number of cells that received grains
    """
    dx = x2 - x1
    dy = y2 - y1
    dx1 = abs(dx)
    dy1 = abs(dy)
    # Walking the dominant axis forward moves the other axis by this step
    step = 1 if (dx < 0 and dy < 0) or (dx > 0 and dy > 0) else -1

    drawn = 0

    if dy1 <= dx1:
        # X-dominant: walk columns, always left to right
        x, y, x_end = (x1, y1, x2) if dx >= 0 else (x2, y2, x1)
        error = 2 * dy1 - dx1
        drawn += grid.add(x, y, increment)
        while x < x_end:
            x += 1
            if error < 0:
                error += 2 * dy1
            else:
                y += step
                error += 2 * (dy1 - dx1)
            drawn += grid.add(x, y, increment)
    else:
        # Y-dominant: walk rows, always top to bottom
        x, y, y_end = (x1, y1, y2) if dy >= 0 else (x2, y2, y1)
        error = 2 * dx1 - dy1
        drawn += grid.add(x, y, increment)
        while y < y_end:
            y += 1
            if error <= 0:
                error += 2 * dx1
            else:
                x += step
                error += 2 * (dx1 - dy1)
            drawn += grid.add(x, y, increment)

    return drawn

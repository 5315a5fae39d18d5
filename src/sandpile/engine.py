"""
Update strategy registry.

The four strategies are drop-in substitutes: for identical input grids and
step counts they produce identical output grids.
"""

import functools
import logging
from typing import Callable, Optional

from .config import STRATEGY_NAMES
from .grid import Grid
from .parallel import update_parallel
from .update import update_branchless, update_iter, update_reference


logger = logging.getLogger(__name__)

UpdateFn = Callable[[Grid], None]

STRATEGIES: dict[str, UpdateFn] = {
    "reference": update_reference,
    "iter": update_iter,
    "branchless": update_branchless,
    "parallel": update_parallel,
}


def get_strategy(name: str, workers: Optional[int] = None) -> UpdateFn:
    """
    Look up an update strategy by name.

    Args:
        name: One of "reference", "iter", "branchless", "parallel"
        workers: Pool size bound into the parallel strategy

    Returns:
        Function advancing a grid by one step in place
    """
    try:
        update = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown strategy {name!r}, expected one of {STRATEGY_NAMES}") from None

    if name == "parallel" and workers is not None:
        return functools.partial(update_parallel, workers=workers)
    return update


def step(grid: Grid, strategy: str = "parallel", steps: int = 1) -> Grid:
    """
    Advance a grid by a number of steps.

    Args:
        grid: Grid updated in place
        strategy: Strategy name
        steps: Number of steps

    Returns:
        The same grid, for chaining
    """
    if steps < 0:
        raise ValueError(f"steps must be >= 0, got {steps}")

    update = get_strategy(strategy)
    logger.debug("Running %d %s step(s) on %r", steps, strategy, grid)
    for _ in range(steps):
        update(grid)
    return grid

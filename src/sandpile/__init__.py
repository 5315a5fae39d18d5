"""
Sandpile - Abelian sandpile cellular automaton

Interchangeable toppling update strategies, from a scalar reference to a
data-parallel row-chunked variant.
"""

__version__ = "0.1.0"

from .config import Config
from .grid import Grid, THRESHOLD, create_initial_grid, create_random_grid
from .engine import STRATEGIES, get_strategy, step
from .update import update_branchless, update_iter, update_reference
from .parallel import ParallelUpdater, update_parallel

__all__ = [
    "Config",
    "Grid",
    "THRESHOLD",
    "create_initial_grid",
    "create_random_grid",
    "STRATEGIES",
    "get_strategy",
    "step",
    "update_reference",
    "update_iter",
    "update_branchless",
    "update_parallel",
    "ParallelUpdater",
    "__version__",
]

"""
Data-parallel toppling update.

Runs the branchless five-pass step with each pass split into disjoint row
chunks that execute concurrently on a fixed-size thread pool. The numpy
kernels release the GIL, so chunks run truly in parallel.

No locks are needed: within a pass every task reads only the snapshot and
writes only its own rows of the live cells. The pass is joined before the
next one is submitted.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .grid import Grid
from .passes import BRANCHLESS, PASSES, row_chunks


logger = logging.getLogger(__name__)


def default_workers() -> int:
    """Worker count used when none is given."""
    return os.cpu_count() or 1


class ParallelUpdater:
    """
    Callable update strategy owning a thread pool.

    Usable as a context manager; the pool is shut down on exit.

    Attributes:
        workers: Number of pool threads and maximum chunks per pass
    """

    def __init__(self, workers: Optional[int] = None):
        """
        Initialize the updater.

        Args:
            workers: Pool size (defaults to the CPU count)
        """
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self.workers = workers if workers is not None else default_workers()
        self._executor = ThreadPoolExecutor(
            max_workers=self.workers,
            thread_name_prefix="sandpile",
        )
        logger.debug("Started update pool with %d workers", self.workers)

    def __call__(self, grid: Grid) -> None:
        """
        Advance the grid by one step.

        Args:
            grid: Grid updated in place
        """
        grid.snapshot()

        cells = grid.rows
        previous = grid.previous_rows

        for stencil in PASSES:
            start, stop = stencil.row_range(grid.height)
            chunks = row_chunks(start, stop, self.workers)

            futures = [
                self._executor.submit(stencil.kernel, cells, previous, a, b, BRANCHLESS)
                for a, b in chunks
            ]
            # Barrier: re-raises any task exception
            for future in futures:
                future.result()

    def close(self) -> None:
        """Shut down the thread pool."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "ParallelUpdater":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ParallelUpdater(workers={self.workers})"


_shared: dict[int, ParallelUpdater] = {}
_shared_lock = threading.Lock()


def shared_updater(workers: Optional[int] = None) -> ParallelUpdater:
    """
    Process-wide updater for the given pool size, created on first use.

    Args:
        workers: Pool size (defaults to the CPU count)

    Returns:
        ParallelUpdater reused by every caller asking for the same size
    """
    if workers is None:
        workers = default_workers()

    with _shared_lock:
        updater = _shared.get(workers)
        if updater is None:
            updater = ParallelUpdater(workers)
            _shared[workers] = updater
        return updater


def update_parallel(grid: Grid, workers: Optional[int] = None) -> None:
    """
    Data-parallel step on the shared pool.

    Args:
        grid: Grid updated in place
        workers: Pool size (defaults to the CPU count)
    """
    shared_updater(workers)(grid)

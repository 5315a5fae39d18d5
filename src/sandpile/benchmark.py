"""
Step timing for the update strategies.

Every strategy starts from a copy of the same random grid, so timings compare
identical work.
"""

import logging
import time
from typing import Optional, Sequence

from tqdm import tqdm

from .config import STRATEGY_NAMES
from .engine import get_strategy
from .grid import create_random_grid


logger = logging.getLogger(__name__)


def benchmark_strategies(
    width: int = 1000,
    height: int = 1000,
    steps: int = 10,
    repeats: int = 3,
    seed: int = 346345234,
    strategies: Optional[Sequence[str]] = None,
    workers: Optional[int] = None,
    show_progress: bool = True,
) -> dict[str, float]:
    """
    Time each strategy on a random grid.

    Args:
        width: Grid width
        height: Grid height
        steps: Steps per timed run
        repeats: Timed runs per strategy (the best one is kept)
        seed: Seed of the random grid
        strategies: Strategy names (defaults to all)
        workers: Pool size for the parallel strategy
        show_progress: Whether to show progress bar

    Returns:
        Best seconds per step for each strategy
    """
    if steps < 1 or repeats < 1:
        raise ValueError(f"steps and repeats must be >= 1, got {steps} and {repeats}")

    names = list(strategies) if strategies is not None else list(STRATEGY_NAMES)
    sample = create_random_grid(width, height, seed=seed)

    results = {}
    iterator = tqdm(names, desc="Benchmarking") if show_progress else names
    for name in iterator:
        update = get_strategy(name, workers=workers)
        best = float("inf")
        for _ in range(repeats):
            grid = sample.copy()
            start = time.perf_counter()
            for _ in range(steps):
                update(grid)
            best = min(best, time.perf_counter() - start)
        results[name] = best / steps
        logger.info("%s: %.6f s/step on %dx%d", name, results[name], width, height)

    return results


def print_benchmark(results: dict[str, float]) -> None:
    """
    Print timings relative to the slowest strategy.

    Args:
        results: Output from benchmark_strategies
    """
    slowest = max(results.values())

    print("\n=== Update Strategy Benchmark ===\n")
    for name, seconds in sorted(results.items(), key=lambda item: item[1]):
        speedup = slowest / seconds if seconds > 0 else float("inf")
        print(f"  {name:<12} {seconds * 1e3:10.3f} ms/step  ({speedup:5.1f}x)")
    print()

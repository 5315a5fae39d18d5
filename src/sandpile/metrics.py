"""
Metrics and analysis utilities for sandpile grids.
"""

import numpy as np

from .grid import Grid, THRESHOLD


def total_grains(grid: Grid) -> int:
    """
    Compute total number of grains on the grid.

    Args:
        grid: Sandpile grid

    Returns:
        Sum over all cells
    """
    return grid.total()


def unstable_cells(grid: Grid) -> int:
    """Number of cells that will topple on the next step."""
    return grid.unstable_count()


def max_height(grid: Grid) -> int:
    """Largest grain count on the grid (0 for an empty grid)."""
    if grid.size == 0:
        return 0
    return int(grid.cells.max())


def height_histogram(grid: Grid) -> dict[str, int]:
    """
    Count cells by height.

    Stable cells hold 0 to THRESHOLD - 1 grains; everything above is lumped
    together.

    Args:
        grid: Sandpile grid

    Returns:
        Dictionary mapping "0".."3" and ">=4" to cell counts
    """
    clipped = np.minimum(grid.cells, THRESHOLD)
    counts = np.bincount(clipped, minlength=THRESHOLD + 1)

    histogram = {str(h): int(counts[h]) for h in range(THRESHOLD)}
    histogram[f">={THRESHOLD}"] = int(counts[THRESHOLD])
    return histogram


def occupied_fraction(grid: Grid) -> float:
    """Fraction of cells holding at least one grain."""
    if grid.size == 0:
        return 0.0
    return float(np.count_nonzero(grid.cells)) / grid.size


def compute_all_metrics(grid: Grid) -> dict:
    """
    Compute all available metrics.

    Args:
        grid: Sandpile grid

    Returns:
        Comprehensive dictionary of all metrics
    """
    return {
        "grains": {
            "total": total_grains(grid),
            "max_height": max_height(grid),
            "mean_height": float(grid.cells.mean()) if grid.size else 0.0,
        },
        "stability": {
            "unstable_cells": unstable_cells(grid),
            "stable": grid.is_stable(),
        },
        "heights": height_histogram(grid),
        "occupied_fraction": occupied_fraction(grid),
    }


def print_metrics_summary(metrics: dict) -> None:
    """
    Print formatted metrics summary.

    Args:
        metrics: Output from compute_all_metrics
    """
    print("\n=== Sandpile Metrics Summary ===\n")

    grains = metrics["grains"]
    print("Grains:")
    print(f"  Total: {grains['total']}")
    print(f"  Max height: {grains['max_height']}")
    print(f"  Mean height: {grains['mean_height']:.4f}")

    stability = metrics["stability"]
    print("\nStability:")
    print(f"  Unstable cells: {stability['unstable_cells']}")
    print(f"  Stable: {stability['stable']}")

    print("\nHeights:")
    for height, count in metrics["heights"].items():
        print(f"  {height}: {count}")

    print(f"\nOccupied fraction: {metrics['occupied_fraction']:.4f}")
    print()

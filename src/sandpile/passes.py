"""
Stencil passes shared by the five-pass update strategies.

One toppling step is split into five sweeps over [H, W] views of the grid:

    left    cell (x, y) gains a grain if (x + 1, y) topples
    right   cell (x, y) gains a grain if (x - 1, y) topples
    up      cell (x, y) gains a grain if (x, y + 1) topples
    down    cell (x, y) gains a grain if (x, y - 1) topples
    settle  cell (x, y) loses THRESHOLD grains if it topples

Every pass reads only the snapshot and writes only the live cells, and writes
to a row only from a single row range. A pass can therefore be split into
disjoint row chunks [start, stop) of the rows it writes, in any order.
"""

from typing import Callable, NamedTuple

import numpy as np

from .grid import THRESHOLD


class Arithmetic(NamedTuple):
    """How a pass applies its gated increment and decrement."""

    add: Callable[[np.ndarray, np.ndarray, int], None]
    sub: Callable[[np.ndarray, np.ndarray, int], None]


def _add_where(target: np.ndarray, source: np.ndarray, amount: int) -> None:
    np.add(target, amount, out=target, where=source >= THRESHOLD)


def _sub_where(target: np.ndarray, source: np.ndarray, amount: int) -> None:
    np.subtract(target, amount, out=target, where=source >= THRESHOLD)


def _add_branchless(target: np.ndarray, source: np.ndarray, amount: int) -> None:
    # 0/1 predicate times the delta, applied to every cell
    target += (source >= THRESHOLD).astype(target.dtype) * amount


def _sub_branchless(target: np.ndarray, source: np.ndarray, amount: int) -> None:
    target -= (source >= THRESHOLD).astype(target.dtype) * amount


CONDITIONAL = Arithmetic(add=_add_where, sub=_sub_where)
BRANCHLESS = Arithmetic(add=_add_branchless, sub=_sub_branchless)


def push_left(cells: np.ndarray, previous: np.ndarray, start: int, stop: int, op: Arithmetic) -> None:
    """Grains moving right-to-left within each row."""
    op.add(cells[start:stop, :-1], previous[start:stop, 1:], 1)


def push_right(cells: np.ndarray, previous: np.ndarray, start: int, stop: int, op: Arithmetic) -> None:
    """Grains moving left-to-right within each row."""
    op.add(cells[start:stop, 1:], previous[start:stop, :-1], 1)


def push_up(cells: np.ndarray, previous: np.ndarray, start: int, stop: int, op: Arithmetic) -> None:
    """Row r gains from snapshot row r + 1. Written rows are [0, H - 1)."""
    op.add(cells[start:stop], previous[start + 1:stop + 1], 1)


def push_down(cells: np.ndarray, previous: np.ndarray, start: int, stop: int, op: Arithmetic) -> None:
    """Row r gains from snapshot row r - 1. Written rows are [1, H)."""
    op.add(cells[start:stop], previous[start - 1:stop - 1], 1)


def settle(cells: np.ndarray, previous: np.ndarray, start: int, stop: int, op: Arithmetic) -> None:
    """Remove THRESHOLD grains from every toppling cell."""
    op.sub(cells[start:stop], previous[start:stop], THRESHOLD)


class StencilPass(NamedTuple):
    """
    One sweep of a step.

    Attributes:
        name: Pass name for logging
        kernel: Function applying the pass to a chunk of written rows
        lead: Rows skipped at the top of the grid
        trail: Rows skipped at the bottom of the grid
    """

    name: str
    kernel: Callable[[np.ndarray, np.ndarray, int, int, Arithmetic], None]
    lead: int = 0
    trail: int = 0

    def row_range(self, height: int) -> tuple[int, int]:
        """Rows [start, stop) written by this pass on a grid of the given height."""
        start = min(self.lead, height)
        return start, max(start, height - self.trail)


# Passes must run in this order, each one finished before the next starts
PASSES = (
    StencilPass("left", push_left),
    StencilPass("right", push_right),
    StencilPass("up", push_up, trail=1),
    StencilPass("down", push_down, lead=1),
    StencilPass("settle", settle),
)


def row_chunks(start: int, stop: int, n_chunks: int) -> list[tuple[int, int]]:
    """
    Partition rows [start, stop) into at most n_chunks contiguous ranges.

    Args:
        start: First row
        stop: One past the last row
        n_chunks: Desired number of chunks

    Returns:
        Non-empty, non-overlapping (start, stop) ranges covering the rows
    """
    n_rows = stop - start
    if n_rows <= 0:
        return []

    n_chunks = max(1, min(n_chunks, n_rows))
    bounds = np.linspace(start, stop, n_chunks + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]


def apply_passes(cells: np.ndarray, previous: np.ndarray, op: Arithmetic) -> None:
    """
    Run all five passes sequentially over the whole grid.

    Args:
        cells: Live cells [H, W], pre-filled with the snapshot
        previous: Snapshot [H, W]
        op: Conditional or branchless arithmetic
    """
    height = cells.shape[0]
    for stencil in PASSES:
        start, stop = stencil.row_range(height)
        if stop > start:
            stencil.kernel(cells, previous, start, stop, op)

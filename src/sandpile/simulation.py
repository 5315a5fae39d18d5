"""
Main simulation loop for the sandpile.

Drives one update strategy over a grid and provides hooks for
visualization/analysis.
"""

import logging
from typing import Callable, Optional

from tqdm import tqdm

from .config import Config
from .engine import get_strategy
from .grid import Grid, create_initial_grid
from .seeding import put_line


logger = logging.getLogger(__name__)


class Simulation:
    """
    Sandpile simulation manager.

    Attributes:
        config: Simulation configuration
        grid: Current grid
        step_count: Number of steps executed
        seed: Seed used for random initial layouts
    """

    def __init__(
        self,
        config: Config,
        seed: Optional[int] = None,
        initial_grid: Optional[Grid] = None,
    ):
        """
        Initialize simulation.

        Args:
            config: Simulation configuration
            seed: Random seed for reproducibility
            initial_grid: Optional pre-initialized grid
        """
        self.config = config
        self.step_count = 0
        self.seed = seed if seed is not None else 42
        self._update = get_strategy(config.strategy, workers=config.workers)

        if initial_grid is not None:
            self.grid = initial_grid
        else:
            self.grid = create_initial_grid(config, seed=self.seed)

    def step(self) -> None:
        """Advance simulation by one toppling step."""
        self._update(self.grid)
        self.step_count += 1

    def run(
        self,
        steps: int,
        callback: Optional[Callable[["Simulation"], None]] = None,
        callback_interval: int = 100,
        show_progress: bool = True,
    ) -> None:
        """
        Run simulation for multiple steps.

        Args:
            steps: Number of steps to run
            callback: Optional function called periodically
            callback_interval: How often to call callback
            show_progress: Whether to show progress bar
        """
        iterator = range(steps)
        if show_progress:
            iterator = tqdm(iterator, desc="Toppling")

        for i in iterator:
            self.step()

            if callback is not None and (i + 1) % callback_interval == 0:
                callback(self)

    def relax(self, max_steps: Optional[int] = None, show_progress: bool = False) -> int:
        """
        Step until no cell can topple.

        Args:
            max_steps: Give up after this many steps (None = no limit)
            show_progress: Whether to show progress bar

        Returns:
            Number of steps taken
        """
        progress = tqdm(desc="Relaxing", total=max_steps) if show_progress else None
        taken = 0

        try:
            while not self.grid.is_stable():
                if max_steps is not None and taken >= max_steps:
                    logger.warning(
                        "Grid still has %d unstable cells after %d steps",
                        self.grid.unstable_count(), taken,
                    )
                    break
                self.step()
                taken += 1
                if progress is not None:
                    progress.update(1)
        finally:
            if progress is not None:
                progress.close()

        logger.info("Relaxed in %d steps (step_count=%d)", taken, self.step_count)
        return taken

    def put_line(self, x1: int, y1: int, x2: int, y2: int) -> int:
        """Draw a line of grains using the configured increment."""
        return put_line(self.grid, x1, y1, x2, y2, self.config.line_grains)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset simulation to initial grid.

        Args:
            seed: New random seed (uses original if not provided)
        """
        if seed is not None:
            self.seed = seed

        self.grid = create_initial_grid(self.config, seed=self.seed)
        self.step_count = 0

    def get_state_dict(self) -> dict:
        """Get serializable state dictionary."""
        return {
            "step_count": self.step_count,
            "seed": self.seed,
            "config": self.config.to_dict(),
            "grid": {
                "width": self.grid.width,
                "height": self.grid.height,
                "cells": self.grid.cells.tolist(),
            },
        }

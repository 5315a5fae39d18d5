"""
Tests for the simulation runner.
"""

import pytest

from sandpile.config import Config
from sandpile.grid import Grid
from sandpile.simulation import Simulation


class TestSimulation:
    """Tests for Simulation."""

    def test_initial_grid_from_config(self, small_config):
        """Grid is built from the config's init mode."""
        sim = Simulation(small_config)

        assert sim.grid.shape == (12, 16)
        assert sim.grid.get(8, 6) == 64
        assert sim.step_count == 0

    def test_initial_grid_override(self, small_config, center_grid):
        """An explicit grid replaces the configured layout."""
        sim = Simulation(small_config, initial_grid=center_grid)

        assert sim.grid is center_grid

    def test_step(self, small_config, center_grid):
        """One step topples and counts."""
        sim = Simulation(small_config, initial_grid=center_grid)
        sim.step()

        assert sim.step_count == 1
        assert center_grid.cells.tolist() == [0, 1, 0, 1, 0, 1, 0, 1, 0]

    def test_run_with_callback(self, small_config):
        """Callback fires every callback_interval steps."""
        sim = Simulation(small_config)
        seen = []

        sim.run(10, callback=lambda s: seen.append(s.step_count), callback_interval=3, show_progress=False)

        assert sim.step_count == 10
        assert seen == [3, 6, 9]

    @pytest.mark.parametrize("strategy", ["reference", "iter", "branchless", "parallel"])
    def test_relax(self, strategy):
        """Relaxing leaves a stable grid with no cell above 3."""
        config = Config(width=15, height=15, strategy=strategy, initial_grains=200, workers=2)
        sim = Simulation(config)

        taken = sim.relax()

        assert taken > 0
        assert sim.step_count == taken
        assert sim.grid.is_stable()
        assert sim.grid.cells.max() <= 3

    def test_relax_same_result_for_every_strategy(self):
        """The stable configuration does not depend on the strategy."""
        results = []
        for strategy in ["reference", "iter", "branchless", "parallel"]:
            sim = Simulation(Config(width=11, height=11, strategy=strategy, initial_grains=150))
            sim.relax()
            results.append(sim.grid)

        assert all(grid == results[0] for grid in results)

    def test_relax_max_steps(self):
        """Relaxation stops at max_steps even when unstable."""
        sim = Simulation(Config(width=21, height=21, strategy="iter", initial_grains=5000))

        taken = sim.relax(max_steps=5)

        assert taken == 5
        assert not sim.grid.is_stable()

    def test_relax_stable_grid(self, small_config):
        """A stable grid needs no steps."""
        sim = Simulation(small_config, initial_grid=Grid(4, 4))

        assert sim.relax() == 0

    def test_put_line_uses_config(self, small_config):
        """Lines use the configured grain increment."""
        config = Config(width=8, height=8, init_mode="empty", line_grains=3, strategy="iter")
        sim = Simulation(config)

        sim.put_line(0, 0, 3, 0)

        assert sim.grid.total() == 12

    def test_reset(self):
        """Reset restores the initial layout and step count."""
        config = Config(width=10, height=10, init_mode="random", random_max=6, strategy="iter")
        sim = Simulation(config, seed=7)
        initial = sim.grid.copy()

        sim.run(5, show_progress=False)
        sim.reset()

        assert sim.step_count == 0
        assert sim.grid == initial

    def test_state_dict(self, small_config):
        """State dictionary is JSON friendly."""
        sim = Simulation(small_config, seed=1)
        sim.step()

        state = sim.get_state_dict()

        assert state["step_count"] == 1
        assert state["seed"] == 1
        assert state["config"]["width"] == 16
        assert len(state["grid"]["cells"]) == 16 * 12
        assert sum(state["grid"]["cells"]) == sim.grid.total()

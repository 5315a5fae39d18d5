#!/usr/bin/env python3
"""
Basic sandpile simulation example.

This script demonstrates:
1. Creating a simulation with custom parameters
2. Drawing a line of grains
3. Relaxing the pile to a stable state
4. Measuring and saving the result
"""

from sandpile import Config
from sandpile.simulation import Simulation
from sandpile.metrics import compute_all_metrics, print_metrics_summary, total_grains
from sandpile.visualization import save_grid_image


def main():
    print("=" * 60)
    print("Abelian Sandpile")
    print("Basic Simulation Example")
    print("=" * 60)
    print()

    # Create configuration
    config = Config(
        width=101,              # Smaller grid for quick demo
        height=101,
        strategy="parallel",    # Row-chunked thread pool update
        workers=4,
        init_mode="center",
        initial_grains=20_000,  # Single pile in the middle
        line_grains=10,
    )

    print("Configuration:")
    print(f"  Grid: {config.width}x{config.height}")
    print(f"  Strategy: {config.strategy} ({config.workers} workers)")
    print()

    # Create simulation
    sim = Simulation(config)

    # Add a diagonal streak of grains next to the pile
    drawn = sim.put_line(10, 10, 40, 30)
    print(f"Drew {drawn} cells of grains")
    print(f"Initial grains: {total_grains(sim.grid)}")
    print()

    # Relax until no cell can topple
    print("Relaxing...")
    steps = sim.relax(show_progress=True)
    print(f"Stable after {steps} steps")
    print()

    # Final measurements
    metrics = compute_all_metrics(sim.grid)
    print_metrics_summary(metrics)

    path = save_grid_image(sim.grid, "output", "sandpile", sim.step_count)
    print(f"Saved image to {path}")


if __name__ == "__main__":
    main()

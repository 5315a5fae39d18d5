"""
Command-line interface for sandpile simulation.

Usage:
    python -m sandpile.main --help
    python -m sandpile.main --visualize
    python -m sandpile.main --width 200 --height 200 --steps 5000 --print-metrics
    python -m sandpile.main --benchmark --width 500 --height 500
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .benchmark import benchmark_strategies, print_benchmark
from .config import Config, INIT_MODES, STRATEGY_NAMES
from .metrics import compute_all_metrics, print_metrics_summary, total_grains
from .simulation import Simulation
from .visualization import Visualizer, save_grid_image


def setup_logging(level: str = "WARNING") -> None:
    """Configure the root logger once for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all options."""
    parser = argparse.ArgumentParser(
        description="Abelian sandpile simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Basic options
    parser.add_argument(
        "--steps", type=int, default=1000,
        help="Number of update steps"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducibility"
    )
    parser.add_argument(
        "--log-level", type=str, default="WARNING",
        help="Logging level"
    )

    # Grid options
    parser.add_argument("--width", type=int, default=None, help="Grid width")
    parser.add_argument("--height", type=int, default=None, help="Grid height")
    parser.add_argument(
        "--init-mode", type=str, default=None, choices=INIT_MODES, dest="init_mode",
        help="Initial grid layout"
    )
    parser.add_argument("--initial-grains", type=int, default=None, dest="initial_grains")
    parser.add_argument("--random-max", type=int, default=None, dest="random_max")
    parser.add_argument("--line-grains", type=int, default=None, dest="line_grains")

    # Engine options
    parser.add_argument(
        "--strategy", type=str, default=None, choices=STRATEGY_NAMES,
        help="Update strategy"
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Thread pool size for the parallel strategy"
    )

    # Visualization options
    parser.add_argument(
        "--visualize", action="store_true",
        help="Show live visualization (drag to draw grains)"
    )
    parser.add_argument(
        "--fps", type=int, default=30,
        help="Frames per second for visualization"
    )
    parser.add_argument(
        "--updates-per-frame", type=int, default=None, dest="updates_per_frame",
        help="Update steps per rendered frame"
    )
    parser.add_argument(
        "--save-frames", type=str, default=None,
        help="Directory to save frame images"
    )
    parser.add_argument(
        "--save-interval", type=int, default=100,
        help="Save frame every N steps"
    )
    parser.add_argument(
        "--save-animation", type=str, default=None,
        help="Path to save animation (mp4 or gif)"
    )

    # Analysis options
    parser.add_argument(
        "--relax", action="store_true",
        help="Step until stable instead of a fixed number of steps"
    )
    parser.add_argument(
        "--check-conservation", action="store_true",
        help="Report grains lost over the boundary"
    )
    parser.add_argument(
        "--print-metrics", action="store_true",
        help="Print all metrics at end"
    )
    parser.add_argument(
        "--save-metrics", type=str, default=None,
        help="Save metrics to JSON file"
    )
    parser.add_argument(
        "--benchmark", action="store_true",
        help="Time every update strategy and exit"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        config = Config.from_args(args)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.benchmark:
        results = benchmark_strategies(
            config.width,
            config.height,
            steps=max(1, min(args.steps, 10)),
            seed=args.seed if args.seed is not None else 346345234,
            workers=config.workers,
        )
        print_benchmark(results)
        return 0

    print("Sandpile Simulation")
    print(f"  Grid: {config.width}x{config.height}")
    print(f"  Strategy: {config.strategy}")
    print(f"  Steps: {'until stable' if args.relax else args.steps}")
    print()

    # Create simulation
    sim = Simulation(config, seed=args.seed)

    # Visualization mode
    if args.visualize:
        viz = Visualizer(sim, fps=args.fps)
        viz.show_live()
        return 0

    # Save animation mode
    if args.save_animation:
        viz = Visualizer(sim, fps=args.fps)
        frames = max(1, args.steps // viz.updates_per_frame)
        viz.save_animation(args.save_animation, frames=frames)
        return 0

    # Frame saving callback
    frame_callback = None
    if args.save_frames:
        output_dir = Path(args.save_frames)

        def frame_callback(s: Simulation) -> None:
            save_grid_image(s.grid, str(output_dir), "frame", s.step_count)
            print(f"  Saved frame at step {s.step_count}")

    initial_grains = total_grains(sim.grid)

    # Run simulation
    if args.relax:
        print("Relaxing...")
        steps_taken = sim.relax(show_progress=True)
        print(f"Stable after {steps_taken} steps")
    else:
        print("Running simulation...")
        sim.run(
            args.steps,
            callback=frame_callback,
            callback_interval=args.save_interval,
            show_progress=True,
        )

    # Final analysis
    print()

    if args.check_conservation:
        final_grains = total_grains(sim.grid)
        lost = initial_grains - final_grains
        print(f"Grains: {initial_grains} -> {final_grains} ({lost} lost over the boundary)")

    if args.print_metrics or args.save_metrics:
        metrics = compute_all_metrics(sim.grid)

        if args.print_metrics:
            print_metrics_summary(metrics)

        if args.save_metrics:
            with open(args.save_metrics, "w") as f:
                json.dump(metrics, f, indent=2)
            print(f"Metrics saved to {args.save_metrics}")

    print("Simulation complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

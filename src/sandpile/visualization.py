"""
Visualization utilities for sandpile grids.

Provides real-time display with mouse drawing and image export.
"""

from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
from matplotlib.animation import FuncAnimation

from .grid import Grid


# Cyclic palette: a cell with n > 0 grains gets PALETTE[(n - 1) % len(PALETTE)]
PALETTE_NAMES = (
    "red", "orange", "yellow", "gold", "green", "blue", "darkblue", "purple",
    "violet", "pink", "maroon", "lime", "darkgreen", "skyblue", "indigo",
    "beige", "brown", "saddlebrown", "white", "lightgray", "gray", "darkgray",
    "magenta",
)

PALETTE = (np.array([mcolors.to_rgb(name) for name in PALETTE_NAMES]) * 255).astype(np.uint8)


def grid_to_rgb(grid: Grid, palette: Optional[Sequence] = None) -> np.ndarray:
    """
    Convert grain counts to an RGB image.

    Empty cells are black; other cells cycle through the palette.

    Args:
        grid: Sandpile grid
        palette: Colors [N, 3] as uint8 (defaults to PALETTE)

    Returns:
        RGB image [H, W, 3] as uint8
    """
    colors = PALETTE if palette is None else np.asarray(palette, dtype=np.uint8)
    counts = grid.rows.astype(np.int64)

    rgb = np.zeros((grid.height, grid.width, 3), dtype=np.uint8)
    filled = counts > 0
    rgb[filled] = colors[(counts[filled] - 1) % len(colors)]
    return rgb


def save_grid_image(
    grid: Grid,
    output_dir: str,
    prefix: str = "frame",
    step: int = 0,
) -> Path:
    """
    Save the grid as a PNG image.

    Args:
        grid: Sandpile grid
        output_dir: Output directory
        prefix: Filename prefix
        step: Step number for filename

    Returns:
        Path of the written image
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    path = output_path / f"{prefix}_{step:06d}.png"
    plt.imsave(path, grid_to_rgb(grid))
    return path


class Visualizer:
    """
    Real-time visualization manager.

    Shows the simulation grid with matplotlib; dragging with the left mouse
    button draws lines of grains onto the grid.
    """

    def __init__(
        self,
        simulation: "Simulation",  # Forward reference
        fps: int = 30,
        updates_per_frame: Optional[int] = None,
    ):
        """
        Initialize visualizer.

        Args:
            simulation: Simulation to visualize
            fps: Target frames per second
            updates_per_frame: Steps per frame (defaults to the config value)
        """
        self.sim = simulation
        self.fps = fps
        self.updates_per_frame = (
            updates_per_frame if updates_per_frame is not None
            else simulation.config.updates_per_frame
        )
        self._last_point: Optional[tuple[int, int]] = None

        # Setup figure
        self.fig, self.ax = plt.subplots(figsize=(6, 6))
        self.fig.patch.set_facecolor("gray")
        self.ax.set_axis_off()

        self.im = self.ax.imshow(grid_to_rgb(self.sim.grid), interpolation="nearest")

        # Add step counter text
        self.text = self.ax.text(
            0.02, 0.98, f"Step: {self.sim.step_count}",
            transform=self.ax.transAxes,
            fontsize=10,
            verticalalignment="top",
            color="white",
            bbox=dict(boxstyle="round", facecolor="black", alpha=0.5),
        )

        self.fig.canvas.mpl_connect("button_press_event", self._on_press)
        self.fig.canvas.mpl_connect("motion_notify_event", self._on_motion)
        self.fig.canvas.mpl_connect("button_release_event", self._on_release)
        self.fig.canvas.mpl_connect("key_press_event", self._on_key)

    def _event_cell(self, event) -> Optional[tuple[int, int]]:
        """Grid cell under a mouse event, or None outside the image."""
        if event.inaxes is not self.ax or event.xdata is None or event.ydata is None:
            return None
        # Image pixel centers sit on integer coordinates
        return int(round(event.xdata)), int(round(event.ydata))

    def _on_press(self, event) -> None:
        if event.button == 1:
            self._last_point = self._event_cell(event)
            if self._last_point is not None:
                self.sim.put_line(*self._last_point, *self._last_point)

    def _on_motion(self, event) -> None:
        if self._last_point is None:
            return
        point = self._event_cell(event)
        if point is None:
            return
        self.sim.put_line(*self._last_point, *point)
        self._last_point = point

    def _on_release(self, event) -> None:
        if event.button == 1:
            self._last_point = None

    def _on_key(self, event) -> None:
        if event.key in ("q", "escape"):
            plt.close(self.fig)

    def _animation_update(self, frame: int) -> list:
        """Update function for animation."""
        for _ in range(self.updates_per_frame):
            self.sim.step()

        self.im.set_array(grid_to_rgb(self.sim.grid))
        self.text.set_text(f"Step: {self.sim.step_count}")

        return [self.im, self.text]

    def show_live(self, frames: Optional[int] = None) -> None:
        """
        Display live animation.

        Args:
            frames: Number of frames to show (None for infinite)
        """
        interval = 1000 // self.fps

        self.anim = FuncAnimation(
            self.fig,
            self._animation_update,
            frames=frames,
            interval=interval,
            blit=True,
            cache_frame_data=False,
        )

        plt.show()

    def save_frame(self, path: str) -> None:
        """
        Save current frame as image.

        Args:
            path: Output file path
        """
        plt.imsave(path, grid_to_rgb(self.sim.grid))

    def save_animation(
        self,
        path: str,
        frames: int = 100,
        fps: Optional[int] = None,
    ) -> None:
        """
        Save animation to file.

        Args:
            path: Output file path (mp4, gif, etc.)
            frames: Number of frames
            fps: Frames per second (uses self.fps if not provided)
        """
        if fps is None:
            fps = self.fps

        interval = 1000 // fps

        anim = FuncAnimation(
            self.fig,
            self._animation_update,
            frames=frames,
            interval=interval,
            blit=True,
        )

        # Determine writer from extension
        suffix = Path(path).suffix.lower()
        if suffix == ".gif":
            anim.save(path, writer="pillow", fps=fps)
        else:
            anim.save(path, writer="ffmpeg", fps=fps)

        print(f"Animation saved to {path}")

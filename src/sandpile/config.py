"""
Configuration dataclass for sandpile simulation parameters.
"""

from dataclasses import dataclass, asdict
from typing import Any, Optional


# Registry names of the interchangeable update strategies
STRATEGY_NAMES = ("reference", "iter", "branchless", "parallel")

INIT_MODES = ("center", "random", "empty")


@dataclass
class Config:
    """
    Complete configuration for a sandpile simulation.

    Attributes:
        width: Number of columns in the grid
        height: Number of rows in the grid

        # Update engine
        strategy: Update strategy ("reference", "iter", "branchless", "parallel")
        workers: Thread pool size for the parallel strategy (None = CPU count)

        # Initialization
        init_mode: Initial grid layout ("center", "random", "empty")
        initial_grains: Grains dropped on the center cell in "center" mode
        random_max: Inclusive upper bound of per-cell grains in "random" mode

        # Interaction
        line_grains: Grains added per cell when drawing a line
        updates_per_frame: Update steps computed between two rendered frames
    """

    # Grid
    width: int = 500
    height: int = 500

    # Update engine
    strategy: str = "parallel"
    workers: Optional[int] = None

    # Initialization
    init_mode: str = "center"
    initial_grains: int = 100_000
    random_max: int = 400

    # Interaction
    line_grains: int = 10
    updates_per_frame: int = 1000

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self._validate()

    def _validate(self) -> None:
        """Check that all parameters are in valid ranges."""
        if self.width < 1:
            raise ValueError(f"width must be >= 1, got {self.width}")

        if self.height < 1:
            raise ValueError(f"height must be >= 1, got {self.height}")

        if self.strategy not in STRATEGY_NAMES:
            raise ValueError(f"strategy must be one of {STRATEGY_NAMES}, got {self.strategy}")

        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

        if self.init_mode not in INIT_MODES:
            raise ValueError(f"init_mode must be one of {INIT_MODES}, got {self.init_mode}")

        if self.initial_grains < 0:
            raise ValueError(f"initial_grains must be >= 0, got {self.initial_grains}")

        if self.random_max < 0:
            raise ValueError(f"random_max must be >= 0, got {self.random_max}")

        if self.line_grains < 0:
            raise ValueError(f"line_grains must be >= 0, got {self.line_grains}")

        if self.updates_per_frame < 1:
            raise ValueError(f"updates_per_frame must be >= 1, got {self.updates_per_frame}")

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Config":
        """Create config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in d.items() if k in known_fields})

    @classmethod
    def from_args(cls, args: Any) -> "Config":
        """Create config from argparse namespace."""
        # Extract only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        config_dict = {k: v for k, v in vars(args).items() if k in known_fields and v is not None}
        return cls(**config_dict)

    @property
    def center(self) -> tuple[int, int]:
        """Coordinates (x, y) of the grid's center cell."""
        return (self.width // 2, self.height // 2)

    def __repr__(self) -> str:
        return (
            f"Config(\n"
            f"  width={self.width}, height={self.height},\n"
            f"  strategy={self.strategy!r}, workers={self.workers},\n"
            f"  init_mode={self.init_mode!r}, initial_grains={self.initial_grains}, "
            f"random_max={self.random_max},\n"
            f"  line_grains={self.line_grains}, updates_per_frame={self.updates_per_frame}\n"
            f")"
        )

# fieldtrace/tracking/particles.py
"""
Lattice point storage and trajectory records.

The lattice is held as flat arrays in row-major order: point (i, j) lives
at index ``i * height + j``, so the second index varies fastest. This is
the order of every emitted record.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any
import numpy as np

# Import JAX utilities with fallback
from ..utils.jax_utils import JAX_AVAILABLE, to_numpy

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    import numpy as jnp  # type: ignore


@dataclass(frozen=True)
class Point:
    """One lattice particle, as a read-only value."""
    x: float
    y: float
    vx: float
    vy: float
    dead: bool

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def velocity(self) -> Tuple[float, float]:
        return self.vx, self.vy


@dataclass(frozen=True, eq=False)
class LatticeState:
    """
    The grid of lattice points at one instant.

    Attributes
    ----------
    width, height : int
        Grid dimensions; indices are i in [0, width), j in [0, height)
    positions : jnp.ndarray
        Positions, shape (width*height, 2), float64
    velocities : jnp.ndarray
        Velocities used by the last update, shape (width*height, 2)
    dead : jnp.ndarray
        Death flags, shape (width*height,), bool
    """
    width: int
    height: int
    positions: jnp.ndarray
    velocities: jnp.ndarray
    dead: jnp.ndarray

    def __post_init__(self):
        n = self.width * self.height
        if tuple(self.positions.shape) != (n, 2):
            raise ValueError(f"positions must have shape ({n}, 2), got {tuple(self.positions.shape)}")
        if tuple(self.velocities.shape) != (n, 2):
            raise ValueError(f"velocities must have shape ({n}, 2), got {tuple(self.velocities.shape)}")
        if tuple(self.dead.shape) != (n,):
            raise ValueError(f"dead must have shape ({n},), got {tuple(self.dead.shape)}")

    @property
    def n_points(self) -> int:
        return self.width * self.height

    @property
    def n_dead(self) -> int:
        """Number of points frozen by the death rule."""
        return int(np.count_nonzero(to_numpy(self.dead)))

    def index(self, i: int, j: int) -> int:
        """Flat row-major index of grid cell (i, j)."""
        if not (0 <= i < self.width and 0 <= j < self.height):
            raise IndexError(f"Grid index ({i}, {j}) out of range ({self.width}, {self.height})")
        return i * self.height + j

    def point(self, i: int, j: int) -> Point:
        """Read grid cell (i, j) as a Point."""
        k = self.index(i, j)
        x, y = to_numpy(self.positions[k])
        vx, vy = to_numpy(self.velocities[k])
        return Point(float(x), float(y), float(vx), float(vy), bool(to_numpy(self.dead[k])))

    def positions_grid(self) -> np.ndarray:
        """Positions as a NumPy array of shape (width, height, 2)."""
        return to_numpy(self.positions).reshape(self.width, self.height, 2)

    def velocities_grid(self) -> np.ndarray:
        """Velocities as a NumPy array of shape (width, height, 2)."""
        return to_numpy(self.velocities).reshape(self.width, self.height, 2)

    def dead_grid(self) -> np.ndarray:
        """Death flags as a NumPy array of shape (width, height)."""
        return to_numpy(self.dead).reshape(self.width, self.height)


@dataclass
class Trajectory:
    """
    In-memory trajectory record, mirroring the text stream layout.

    Attributes
    ----------
    positions : np.ndarray
        Positions after every step, shape (S, N, 2), float64
    initial_velocities : np.ndarray
        Field velocities at the initial lattice positions, shape (N, 2)
    width, height : int
        Grid dimensions (N = width * height)
    time_step : float
        Integration time step
    dead : np.ndarray, optional
        Final death flags, shape (N,); not part of the stream, so None
        for trajectories read back from text
    metadata : dict
        Additional trajectory information
    """
    positions: np.ndarray
    initial_velocities: np.ndarray
    width: int
    height: int
    time_step: float
    dead: Optional[np.ndarray] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.positions = np.asarray(self.positions, dtype=np.float64)
        self.initial_velocities = np.asarray(self.initial_velocities, dtype=np.float64)
        n = self.width * self.height

        if self.positions.ndim != 3 or self.positions.shape[1:] != (n, 2):
            raise ValueError(f"positions must have shape (S, {n}, 2), got {self.positions.shape}")
        if self.initial_velocities.shape != (n, 2):
            raise ValueError(
                f"initial_velocities must have shape ({n}, 2), got {self.initial_velocities.shape}"
            )
        if self.dead is not None:
            self.dead = np.asarray(self.dead, dtype=bool)
            if self.dead.shape != (n,):
                raise ValueError(f"dead must have shape ({n},), got {self.dead.shape}")

        self.metadata.setdefault('format_version', '1.0')

    def __len__(self) -> int:
        """Number of recorded steps."""
        return self.positions.shape[0]

    @property
    def step_count(self) -> int:
        return self.positions.shape[0]

    @property
    def n_points(self) -> int:
        return self.width * self.height

    @property
    def final_positions(self) -> np.ndarray:
        """Positions after the last step, shape (N, 2)."""
        return self.positions[-1].copy()

    def get_positions_at_step(self, step: int) -> np.ndarray:
        """
        Positions recorded after ``step`` (0-based), shape (N, 2).
        """
        if not 0 <= step < self.step_count:
            raise IndexError(f"Step index {step} out of range [0, {self.step_count})")
        return self.positions[step].copy()

    def get_point_trajectory(self, i: int, j: int) -> np.ndarray:
        """
        Path of grid cell (i, j) over all steps, shape (S, 2).
        """
        if not (0 <= i < self.width and 0 <= j < self.height):
            raise IndexError(f"Grid index ({i}, {j}) out of range ({self.width}, {self.height})")
        return self.positions[:, i * self.height + j].copy()

    def compute_displacement(self) -> np.ndarray:
        """Distance from the first to the last recorded position, shape (N,)."""
        return np.linalg.norm(self.positions[-1] - self.positions[0], axis=1)

    def memory_usage_mb(self) -> float:
        """Approximate memory footprint in MB."""
        total = self.positions.nbytes + self.initial_velocities.nbytes
        if self.dead is not None:
            total += self.dead.nbytes
        return total / (1024 ** 2)

# fieldtrace/fields/base.py
"""
Base protocols and helpers for velocity fields.

A field maps a 2D position to a 2D velocity. Fields are time-invariant and
pure: sampling the same positions twice returns the same velocities and
never touches external state.
"""

from __future__ import annotations
from typing import Protocol, Tuple

import numpy as np

# Import JAX utilities for array handling
from ..utils.jax_utils import JAX_AVAILABLE

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    import numpy as jnp  # type: ignore


class Field(Protocol):
    """
    Protocol for static 2D velocity fields.

    Implementations provide both a scalar evaluation for a single position
    and a vectorized sampler used by the simulator.
    """

    name: str

    def evaluate(self, x: float, y: float) -> Tuple[float, float]:
        """
        Velocity at a single position.

        Parameters
        ----------
        x, y : float
            Position coordinates

        Returns
        -------
        Tuple[float, float]
            (vx, vy)
        """
        ...

    def sample(self, positions: jnp.ndarray) -> jnp.ndarray:
        """
        Sample field at positions.

        Parameters
        ----------
        positions : jnp.ndarray
            Positions to sample, shape (N, 2)

        Returns
        -------
        jnp.ndarray
            Velocities, shape (N, 2)
        """
        ...


def _ensure_positions_shape(positions) -> jnp.ndarray:
    """Ensure positions are float64 with shape (N, 2)."""
    pos = jnp.asarray(positions, dtype=jnp.float64)
    if pos.ndim == 1:
        pos = pos.reshape(1, -1)  # Single point case
    if pos.ndim != 2 or pos.shape[1] != 2:
        raise ValueError(f"Positions must have shape (N,2), got {tuple(np.shape(positions))}")
    return pos

# fieldtrace/integrators/euler.py
"""
Forward Euler integration.

Velocities are evaluated at the start-of-step positions for every point
before any position moves, then applied on both axes independently.
"""

from __future__ import annotations

from .base import FieldFn
from ..utils.jax_utils import JAX_AVAILABLE

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    import numpy as jnp  # type: ignore


def euler_step(
    x: jnp.ndarray,
    dt: float,
    field_fn: FieldFn,
) -> tuple:
    """
    Forward Euler integration step: x_{n+1} = x_n + dt * v(x_n).

    Parameters
    ----------
    x : jnp.ndarray
        Current positions, shape (N, 2)
    dt : float
        Time step size
    field_fn : FieldFn
        Velocity field function returning shape (N, 2)

    Returns
    -------
    (jnp.ndarray, jnp.ndarray)
        Updated positions and the sampled velocities, each shape (N, 2)
    """
    v = field_fn(x)
    return x + v * dt, v

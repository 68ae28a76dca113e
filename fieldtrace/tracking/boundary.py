# fieldtrace/tracking/boundary.py
"""
Death rule for lattice points.

A point whose position magnitude exceeds the configured limit on either
axis is frozen: its velocity becomes zero and its position never changes
again. Frozen points stay in the lattice so every record keeps the same
size and order.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol
import numpy as np

# Import JAX utilities with fallback
from ..utils.jax_utils import JAX_AVAILABLE, to_numpy

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    import numpy as jnp  # type: ignore


class DeathRule(Protocol):
    """Protocol for death rules: positions (N, 2) -> mask (N,) of points to freeze."""

    def __call__(self, positions: jnp.ndarray) -> jnp.ndarray:
        ...


@dataclass(frozen=True)
class MagnitudeCutoff:
    """
    Freeze points with ``|x| > x_limit`` or ``|y| > y_limit``.

    The comparison is strict and uses the real-valued absolute value, so a
    point sitting exactly on the limit stays alive. Non-finite coordinates
    also count as outside.
    """
    x_limit: float
    y_limit: float

    def __call__(self, positions: jnp.ndarray) -> jnp.ndarray:
        x = positions[:, 0]
        y = positions[:, 1]
        outside = jnp.logical_or(jnp.abs(x) > self.x_limit, jnp.abs(y) > self.y_limit)
        return jnp.logical_or(outside, ~jnp.all(jnp.isfinite(positions), axis=1))


def magnitude_cutoff(x_limit: float, y_limit: float) -> MagnitudeCutoff:
    """
    Create the axis-wise magnitude death rule.

    Parameters
    ----------
    x_limit, y_limit : float
        Largest allowed ``|x|`` and ``|y|``

    Returns
    -------
    MagnitudeCutoff
        Callable mapping positions (N, 2) to a boolean mask (N,)
    """
    if not (x_limit > 0 and y_limit > 0):
        raise ValueError(f"Death limits must be positive, got ({x_limit}, {y_limit})")
    return MagnitudeCutoff(float(x_limit), float(y_limit))


def check_boundary_violations(positions, rule: DeathRule) -> dict:
    """
    Summarize how many positions a rule would freeze.

    Returns
    -------
    dict
        'n_total', 'n_outside' and 'fraction_outside'
    """
    mask = np.asarray(to_numpy(rule(jnp.asarray(positions, dtype=jnp.float64))), dtype=bool)
    n_total = int(mask.size)
    n_outside = int(np.count_nonzero(mask))
    return {
        'n_total': n_total,
        'n_outside': n_outside,
        'fraction_outside': n_outside / n_total if n_total else 0.0,
    }

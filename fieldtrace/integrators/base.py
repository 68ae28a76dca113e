# fieldtrace/integrators/base.py

from __future__ import annotations
from typing import Callable, Protocol

from ..utils.jax_utils import JAX_AVAILABLE

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    import numpy as jnp  # type: ignore

# Field function signature: takes positions (N, 2), returns velocities (N, 2)
FieldFn = Callable[[jnp.ndarray], jnp.ndarray]


class IntegratorFn(Protocol):
    """
    Protocol for integrator step functions.

    An integrator returns both the new positions and the velocities it used,
    so the simulator can store the velocity on each point.
    """

    def __call__(
        self,
        x: jnp.ndarray,
        dt: float,
        field_fn: FieldFn,
    ) -> tuple:
        """
        Advance positions by one time step.

        Parameters
        ----------
        x : jnp.ndarray
            Current positions, shape (N, 2)
        dt : float
            Time step size
        field_fn : FieldFn
            Velocity field sampled at the current positions

        Returns
        -------
        (jnp.ndarray, jnp.ndarray)
            New positions and the velocities used, each shape (N, 2)
        """
        ...

# fieldtrace/fields/analytic.py
"""
Closed-form velocity fields f(x, y) -> (vx, vy).

Every expression uses trigonometric and algebraic terms only, so it is
defined and finite over the whole real plane. Fields are registered by
name and selected when the simulation is configured.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from ..errors import ConfigurationError
from ..utils.jax_utils import JAX_AVAILABLE
from .base import _ensure_positions_shape

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    import numpy as jnp  # type: ignore

# Expression signature: works elementwise on scalars or arrays
Expression = Callable[[jnp.ndarray, jnp.ndarray], Tuple[jnp.ndarray, jnp.ndarray]]


@dataclass(frozen=True)
class AnalyticField:
    """
    Velocity field backed by a two-variable closed-form expression.

    Attributes
    ----------
    name : str
        Registry name of the field
    expression : Expression
        ``expression(x, y) -> (vx, vy)``, elementwise
    description : str
        Human-readable formula
    """
    name: str
    expression: Expression
    description: str = ""

    def evaluate(self, x: float, y: float) -> Tuple[float, float]:
        """Velocity at a single position as Python floats."""
        vx, vy = self.expression(jnp.asarray(x, dtype=jnp.float64),
                                 jnp.asarray(y, dtype=jnp.float64))
        return float(vx), float(vy)

    def sample(self, positions: jnp.ndarray) -> jnp.ndarray:
        """Velocities at positions, shape (N, 2) -> (N, 2)."""
        pos = _ensure_positions_shape(positions)
        vx, vy = self.expression(pos[:, 0], pos[:, 1])
        # Broadcast so constant expressions still yield one row per position
        vx = jnp.broadcast_to(jnp.asarray(vx, dtype=jnp.float64), pos[:, 0].shape)
        vy = jnp.broadcast_to(jnp.asarray(vy, dtype=jnp.float64), pos[:, 1].shape)
        return jnp.stack([vx, vy], axis=1)

    def __call__(self, positions: jnp.ndarray) -> jnp.ndarray:
        return self.sample(positions)


# ---------- Named expressions ----------

def _cosine_sine(x, y):
    return -y * jnp.cos(y), x * jnp.sin(-x)


def _sine_cosine(x, y):
    return -x * jnp.sin(y), -y * jnp.cos(x)


def _cross_cosine(x, y):
    return -y * jnp.cos(x), x * jnp.sin(-x)


def _sine_sine(x, y):
    return -x * jnp.sin(y), x * jnp.sin(-x)


DEFAULT_FIELD = "cosine_sine"

_REGISTRY: Dict[str, AnalyticField] = {
    "cosine_sine": AnalyticField("cosine_sine", _cosine_sine, "vx = -y*cos(y), vy = x*sin(-x)"),
    "sine_cosine": AnalyticField("sine_cosine", _sine_cosine, "vx = -x*sin(y), vy = -y*cos(x)"),
    "cross_cosine": AnalyticField("cross_cosine", _cross_cosine, "vx = -y*cos(x), vy = x*sin(-x)"),
    "sine_sine": AnalyticField("sine_sine", _sine_sine, "vx = -x*sin(y), vy = x*sin(-x)"),
}


def constant_field(vx: float, vy: float) -> AnalyticField:
    """Uniform field returning (vx, vy) everywhere."""
    vx, vy = float(vx), float(vy)
    return AnalyticField(
        name=f"constant({vx:g},{vy:g})",
        expression=lambda x, y: (vx, vy),
        description=f"vx = {vx:g}, vy = {vy:g}",
    )


def register_field(field: AnalyticField, overwrite: bool = False) -> None:
    """Add a field to the name registry."""
    if field.name in _REGISTRY and not overwrite:
        raise ValueError(f"Field '{field.name}' is already registered")
    _REGISTRY[field.name] = field


def get_field(name: str = DEFAULT_FIELD) -> AnalyticField:
    """
    Look up a registered field by name.

    Raises
    ------
    ConfigurationError
        If no field is registered under ``name``
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown field: {name}. Available: {list_fields()}", parameter="field"
        ) from None


def list_fields() -> List[str]:
    """Names of all registered fields."""
    return sorted(_REGISTRY)

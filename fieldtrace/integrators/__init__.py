"""
fieldtrace integrators

Explicit time-stepping for lattice advection. A stepper follows the
signature:

    new_x, v = step(x, dt, field_fn)

where:
- x: (N,2) positions
- dt: scalar time step
- field_fn: callable x -> (N,2) velocities
"""

from .base import FieldFn, IntegratorFn
from .euler import euler_step

__all__ = [
    "FieldFn",
    "IntegratorFn",
    "euler_step",
]

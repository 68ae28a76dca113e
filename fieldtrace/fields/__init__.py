# fieldtrace/fields/__init__.py
"""
Velocity field evaluators.

A field is a pure, time-invariant map (x, y) -> (vx, vy) exposed as a
substitutable unit, so the integration loop never inlines a formula.
"""

from .base import Field
from .analytic import (
    AnalyticField,
    DEFAULT_FIELD,
    constant_field,
    get_field,
    list_fields,
    register_field,
)

__all__ = [
    "Field",
    "AnalyticField",
    "DEFAULT_FIELD",
    "constant_field",
    "get_field",
    "list_fields",
    "register_field",
]

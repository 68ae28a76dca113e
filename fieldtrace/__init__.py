"""
fieldtrace: lattice advection through analytic vector fields.

Moves every point of a 2D integer lattice through a time-invariant field
f(x, y) -> (vx, vy) with forward Euler steps, freezes points that run past
a magnitude limit, and records each point's full trajectory as a flat
text stream for external tools.

Core workflow:
1. Pick a field → get_field("cosine_sine")
2. Set parameters → SimulationParameters(width=41, height=41, ...)
3. Run → LatticeSimulator(...).run("data/simulation_data.txt")
4. Read back → read_trajectory(path)
"""

from __future__ import annotations

# Version info
__version__ = "0.1.0"
__author__ = "fieldtrace Contributors"

from .utils.jax_utils import JAX_AVAILABLE
from .utils.config import configure, get_config, reset_config

from .errors import (
    FieldTraceError,
    ConfigurationError,
    SinkWriteError,
    TrajectoryFormatError,
)

from .fields import (
    AnalyticField,
    DEFAULT_FIELD,
    constant_field,
    get_field,
    list_fields,
    register_field,
)

from .integrators import euler_step

from .tracking import (
    Point,
    LatticeState,
    Trajectory,
    lattice_seeds,
    magnitude_cutoff,
    SimulationParameters,
    SimulationPhase,
    LatticeSimulator,
    create_simulator,
    simulate,
)

from .io import (
    TrajectoryWriter,
    open_sink,
    write_trajectory,
    read_trajectory,
)

# Core API exports
__all__ = [
    # Version
    "__version__",
    # Backend and configuration
    "JAX_AVAILABLE",
    "configure",
    "get_config",
    "reset_config",
    # Errors
    "FieldTraceError",
    "ConfigurationError",
    "SinkWriteError",
    "TrajectoryFormatError",
    # Fields
    "AnalyticField",
    "DEFAULT_FIELD",
    "constant_field",
    "get_field",
    "list_fields",
    "register_field",
    # Integrators
    "euler_step",
    # Tracking
    "Point",
    "LatticeState",
    "Trajectory",
    "lattice_seeds",
    "magnitude_cutoff",
    "SimulationParameters",
    "SimulationPhase",
    "LatticeSimulator",
    "create_simulator",
    "simulate",
    # I/O
    "TrajectoryWriter",
    "open_sink",
    "write_trajectory",
    "read_trajectory",
]

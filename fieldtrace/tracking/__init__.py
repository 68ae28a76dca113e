# fieldtrace/tracking/__init__.py
"""
Lattice tracking: grid seeding, the death rule, and the simulator.

Main Components:
- Point / LatticeState: the grid of lattice points
- Trajectory: (S,N,2) in-memory record
- lattice_seeds: centered integer lattice
- magnitude_cutoff: axis-wise death rule
- LatticeSimulator: initialize / step / run / track
"""

from .particles import (
    Point,
    LatticeState,
    Trajectory,
)

from .seeding import lattice_seeds

from .boundary import (
    DeathRule,
    MagnitudeCutoff,
    magnitude_cutoff,
    check_boundary_violations,
)

from .tracker import (
    SimulationParameters,
    SimulationPhase,
    LatticeSimulator,
    initialize_lattice,
    create_simulator,
    simulate,
)

__all__ = [
    "Point",
    "LatticeState",
    "Trajectory",
    "lattice_seeds",
    "DeathRule",
    "MagnitudeCutoff",
    "magnitude_cutoff",
    "check_boundary_violations",
    "SimulationParameters",
    "SimulationPhase",
    "LatticeSimulator",
    "initialize_lattice",
    "create_simulator",
    "simulate",
]

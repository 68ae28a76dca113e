# fieldtrace/tracking/tracker.py
"""
Lattice simulator: grid initialization, forward Euler stepping, the death
rule, and trajectory emission.

- Fixed step count known up front; the run is strictly linear
- Optional JAX JIT of the per-step update (NumPy fallback otherwise)
- Progress via tqdm or a single-line reporter, off by default
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, TextIO, Union
import math
import os
import numpy as np

from ..errors import ConfigurationError
from ..fields import AnalyticField, get_field, DEFAULT_FIELD
from ..integrators import euler_step
from ..utils.config import get_config
from ..utils.jax_utils import JAX_AVAILABLE, maybe_jit, to_numpy
from ..utils.logging import make_progress
from .boundary import DeathRule, magnitude_cutoff
from .particles import LatticeState, Trajectory
from .seeding import lattice_seeds

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    import numpy as jnp  # type: ignore

# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

def _require_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}", parameter=name)
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", parameter=name)
    return int(value)


def _require_positive_real(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a real number, got {value!r}", parameter=name)
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a real number, got {value!r}", parameter=name) from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be positive and finite, got {value}", parameter=name)
    return value


@dataclass(frozen=True)
class SimulationParameters:
    """
    Immutable simulation inputs, validated on construction.

    ``x_limit``/``y_limit`` default to twice the grid dimension on that axis.
    """
    width: int = 41
    height: int = 41
    time_step: float = 0.01
    step_count: int = 1000
    x_limit: Optional[float] = None
    y_limit: Optional[float] = None

    def __post_init__(self):
        # frozen: normalized values are written through object.__setattr__
        object.__setattr__(self, "width", _require_positive_int("width", self.width))
        object.__setattr__(self, "height", _require_positive_int("height", self.height))
        object.__setattr__(self, "step_count", _require_positive_int("step_count", self.step_count))
        object.__setattr__(self, "time_step", _require_positive_real("time_step", self.time_step))

        x_limit = 2 * self.width if self.x_limit is None else self.x_limit
        y_limit = 2 * self.height if self.y_limit is None else self.y_limit
        object.__setattr__(self, "x_limit", _require_positive_real("x_limit", x_limit))
        object.__setattr__(self, "y_limit", _require_positive_real("y_limit", y_limit))

    @property
    def n_points(self) -> int:
        return self.width * self.height

    @property
    def total_lines(self) -> int:
        """Line count of the emitted stream: header + snapshot + blocks."""
        return 4 + self.n_points + self.step_count * self.n_points

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SimulationParameters":
        """Build from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown simulation parameters: {unknown}. Available: {sorted(known)}"
            )
        return cls(**dict(d))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SimulationPhase(Enum):
    NOT_STARTED = "not_started"
    INITIALIZED = "initialized"
    STEPPING = "stepping"
    FINISHED = "finished"


def initialize_lattice(params: SimulationParameters) -> LatticeState:
    """
    Populate a centered ``width x height`` lattice: zero velocity, all alive.
    """
    seeds = lattice_seeds(params.width, params.height)
    return LatticeState(
        width=params.width,
        height=params.height,
        positions=jnp.asarray(seeds, dtype=jnp.float64),
        velocities=jnp.zeros((params.n_points, 2), dtype=jnp.float64),
        dead=jnp.zeros((params.n_points,), dtype=bool),
    )

# ---------------------------------------------------------------------------
# Lattice Simulator
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class LatticeSimulator:
    """
    Advects a lattice of points through a time-invariant field.

    Owns the grid for the lifetime of the run. Phases advance strictly
    NOT_STARTED -> INITIALIZED -> STEPPING -> FINISHED; none can be
    repeated or undone.
    """
    params: SimulationParameters = field(default_factory=SimulationParameters)
    velocity_field: AnalyticField = field(default_factory=get_field)
    integrator: Callable = euler_step            # (x, dt, field_fn) -> (x_next, v)
    death_rule: Optional[DeathRule] = None       # defaults to the params' magnitude cutoff

    _state: Optional[LatticeState] = field(default=None, init=False, repr=False)
    _phase: SimulationPhase = field(default=SimulationPhase.NOT_STARTED, init=False)
    _steps_taken: int = field(default=0, init=False)
    _compiled_advance: Optional[Callable] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.params, SimulationParameters):
            raise TypeError("params must be SimulationParameters")
        if not hasattr(self.velocity_field, "sample"):
            raise TypeError("velocity_field must provide sample(positions)")
        if not callable(self.integrator):
            raise TypeError("integrator must be callable")
        if self.death_rule is None:
            self.death_rule = magnitude_cutoff(self.params.x_limit, self.params.y_limit)

        self._compiled_advance = maybe_jit(self._advance, enable=get_config().use_jax_jit)

    # ------------------------ State ------------------------

    @property
    def phase(self) -> SimulationPhase:
        return self._phase

    @property
    def state(self) -> LatticeState:
        if self._state is None:
            raise RuntimeError("Simulation not initialized")
        return self._state

    @property
    def steps_taken(self) -> int:
        return self._steps_taken

    # ------------------------ Core operations ------------------------

    def initialize(self) -> LatticeState:
        """Build the starting lattice."""
        if self._phase is not SimulationPhase.NOT_STARTED:
            raise RuntimeError(f"Cannot initialize a simulation in phase '{self._phase.value}'")
        self._state = initialize_lattice(self.params)
        self._phase = SimulationPhase.INITIALIZED
        return self._state

    def _advance(self, positions, velocities, dead):
        """One forward Euler step with the death rule; pure array function."""
        alive = jnp.logical_not(dead)
        # Dead points are sampled at the origin and the result discarded
        probe = jnp.where(alive[:, None], positions, 0.0)
        moved, v = self.integrator(probe, self.params.time_step, self.velocity_field.sample)

        outside = self.death_rule(moved)
        newly_dead = jnp.logical_and(alive, outside)
        still_alive = jnp.logical_and(alive, jnp.logical_not(outside))

        new_positions = jnp.where(alive[:, None], moved, positions)
        new_velocities = jnp.where(still_alive[:, None], v, 0.0)
        new_dead = jnp.logical_or(dead, newly_dead)
        return new_positions, new_velocities, new_dead

    def step(self) -> LatticeState:
        """
        Advance every live point by one time step.

        Velocity is sampled at each point's current position, the position
        moves by ``velocity * time_step``, then points past the limit are
        frozen. Dead points are left untouched.
        """
        if self._phase is SimulationPhase.NOT_STARTED:
            raise RuntimeError("Simulation not initialized; call initialize() first")
        if self._phase is SimulationPhase.FINISHED:
            raise RuntimeError("Simulation already finished")

        s = self._state
        positions, velocities, dead = self._compiled_advance(s.positions, s.velocities, s.dead)
        self._state = LatticeState(s.width, s.height, positions, velocities, dead)
        self._phase = SimulationPhase.STEPPING
        self._steps_taken += 1
        return self._state

    def initial_velocities(self) -> np.ndarray:
        """Field velocities at the initial lattice positions, shape (N, 2)."""
        seeds = lattice_seeds(self.params.width, self.params.height)
        return to_numpy(self.velocity_field.sample(jnp.asarray(seeds, dtype=jnp.float64)))

    def _begin_run(self) -> None:
        if self._phase is SimulationPhase.NOT_STARTED:
            self.initialize()
        elif self._phase is not SimulationPhase.INITIALIZED:
            raise RuntimeError(f"Cannot run a simulation in phase '{self._phase.value}'")

    def _iterate(self, on_step: Callable[[LatticeState], None]) -> LatticeState:
        """Take ``step_count`` steps, handing each new state to ``on_step``."""
        config = get_config()
        style = config.progress_style if config.show_progress else "none"
        update, close = make_progress(self.params.step_count, desc=config.progress_desc, style=style)
        try:
            for _ in range(self.params.step_count):
                on_step(self.step())
                update(1)
        finally:
            close()
        self._phase = SimulationPhase.FINISHED
        return self._state

    def run(self, sink: Union[str, os.PathLike, TextIO]) -> LatticeState:
        """
        Emit the header and velocity snapshot, then step ``step_count``
        times, emitting all positions after each step.

        Parameters
        ----------
        sink : path or writable stream
            A path is opened and always closed; a stream is flushed and
            left open for the caller.

        Returns
        -------
        LatticeState
            Final lattice

        Raises
        ------
        SinkWriteError
            If the sink cannot be written; the run stops at that point
        """
        from ..io.writer import TrajectoryWriter, open_sink

        self._begin_run()
        with open_sink(sink) as stream:
            writer = TrajectoryWriter(stream)
            writer.write_header(self.params)
            writer.write_velocities(self.initial_velocities())
            final = self._iterate(lambda state: writer.write_positions(state.positions))
            writer.flush()
        return final

    def track(self) -> Trajectory:
        """
        Run the whole simulation in memory and return the recorded trajectory.
        """
        self._begin_run()
        initial_velocities = self.initial_velocities()
        positions = np.empty((self.params.step_count, self.params.n_points, 2), dtype=np.float64)

        def record(state: LatticeState) -> None:
            positions[self._steps_taken - 1] = to_numpy(state.positions)

        final = self._iterate(record)
        return Trajectory(
            positions=positions,
            initial_velocities=initial_velocities,
            width=self.params.width,
            height=self.params.height,
            time_step=self.params.time_step,
            dead=to_numpy(final.dead),
            metadata={
                'field': getattr(self.velocity_field, 'name', str(self.velocity_field)),
                'integrator': getattr(self.integrator, '__name__', str(self.integrator)),
                'x_limit': self.params.x_limit,
                'y_limit': self.params.y_limit,
                'n_dead': final.n_dead,
            }
        )

# ---------------------------------------------------------------------------
# Factory and convenience functions
# ---------------------------------------------------------------------------

def create_simulator(
    field_name: str = DEFAULT_FIELD,
    integrator_name: str = 'euler',
    **params
) -> LatticeSimulator:
    """
    Factory for LatticeSimulator with a named field and integrator.

    ``params`` are passed to SimulationParameters.
    """
    integrators = {
        'euler': euler_step,
    }
    if integrator_name not in integrators:
        raise ConfigurationError(
            f"Unknown integrator: {integrator_name}. Available: {list(integrators.keys())}",
            parameter="integrator",
        )

    return LatticeSimulator(
        params=SimulationParameters.from_dict(params),
        velocity_field=get_field(field_name),
        integrator=integrators[integrator_name],
    )


def simulate(
    params: Optional[SimulationParameters] = None,
    velocity_field: Optional[AnalyticField] = None,
    sink: Optional[Union[str, os.PathLike, TextIO]] = None,
) -> Union[LatticeState, Trajectory]:
    """
    Simple convenience wrapper: write to ``sink`` when given, else record in memory.
    """
    simulator = LatticeSimulator(
        params=params or SimulationParameters(),
        velocity_field=velocity_field or get_field(),
    )
    if sink is None:
        return simulator.track()
    return simulator.run(sink)


__all__ = [
    'SimulationParameters',
    'SimulationPhase',
    'LatticeSimulator',
    'initialize_lattice',
    'create_simulator',
    'simulate',
]

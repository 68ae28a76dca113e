#!/usr/bin/env python3
"""
Minimal fieldtrace Example

1. Pick a velocity field
2. Simulate a small lattice in memory
3. Inspect dead points and trajectories
4. Write the trajectory stream and read it back
"""

from pathlib import Path

import numpy as np

import fieldtrace as ft
from fieldtrace.utils.logging import timeit


def main():
    print("fieldtrace Minimal Example")
    print("=" * 30)

    params = ft.SimulationParameters(width=21, height=21, time_step=0.01, step_count=500)
    field = ft.get_field("cosine_sine")
    print(f"Field: {field.name} ({field.description})")

    simulator = ft.LatticeSimulator(params=params, velocity_field=field)
    with timeit("Tracking"):
        trajectory = simulator.track()

    print(f"Recorded {len(trajectory)} steps for {trajectory.n_points} points")
    print(f"Dead points: {int(np.count_nonzero(trajectory.dead))}")

    displacement = trajectory.compute_displacement()
    print(f"Mean displacement: {displacement.mean():.3f}, max: {displacement.max():.3f}")

    center = trajectory.get_point_trajectory(params.width // 2, params.height // 2)
    print(f"Center point final position: ({center[-1, 0]:.6f}, {center[-1, 1]:.6f})")

    output_dir = Path("output_example")
    output_file = output_dir / "simulation_data.txt"
    n_lines = ft.write_trajectory(trajectory, output_file)
    print(f"Wrote {n_lines} lines to {output_file}")

    restored = ft.read_trajectory(output_file)
    # The stream stores six decimals
    assert np.allclose(restored.positions, trajectory.positions, atol=1e-6)
    print("Round trip OK")


if __name__ == "__main__":
    main()

# fieldtrace/tracking/seeding.py
"""
Seed position generators for lattice simulations.
"""

from __future__ import annotations
import numpy as np


def lattice_seeds(width: int, height: int) -> np.ndarray:
    """
    Integer lattice centered on the origin, in row-major order.

    Cell (i, j) sits at ``(i - width // 2, j - height // 2)``. Floor
    division leaves a half-cell offset toward negative coordinates when a
    dimension is even.

    Parameters
    ----------
    width, height : int
        Grid dimensions

    Returns
    -------
    np.ndarray
        Seed positions, shape (width*height, 2), dtype float64
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Lattice dimensions must be positive, got ({width}, {height})")

    x_coords = np.arange(width, dtype=np.int64) - width // 2
    y_coords = np.arange(height, dtype=np.int64) - height // 2

    # 'ij' indexing keeps j as the fastest-varying index after ravel
    X, Y = np.meshgrid(x_coords, y_coords, indexing='ij')

    return np.column_stack([X.ravel(), Y.ravel()]).astype(np.float64)

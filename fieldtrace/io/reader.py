# fieldtrace/io/reader.py
"""
Read trajectory streams back into memory.

Intended for downstream consumers and for checking a finished run: the
header is parsed first, then the velocity snapshot and every position
block are loaded with NumPy and checked against the declared sizes.
"""

from __future__ import annotations
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, List, Union
import io
import os

import numpy as np

from ..errors import TrajectoryFormatError
from ..tracking.particles import Trajectory


@contextmanager
def _open_source(source: Union[str, os.PathLike, IO]) -> Iterator[IO]:
    if isinstance(source, (str, os.PathLike)):
        with open(Path(source), "r", encoding="ascii") as handle:
            yield handle
    elif isinstance(source, (io.RawIOBase, io.BufferedIOBase)):
        wrapper = io.TextIOWrapper(source, encoding="ascii")
        try:
            yield wrapper
        finally:
            # Hand the underlying stream back to the caller unclosed
            wrapper.detach()
    else:
        yield source


def _parse_header(lines: List[str]) -> tuple:
    if len(lines) < 4:
        raise TrajectoryFormatError(f"Header needs 4 lines, found {len(lines)}", line_number=len(lines) + 1)
    try:
        width = int(lines[0])
        height = int(lines[1])
        time_step = float(lines[2])
        step_count = int(lines[3])
    except ValueError as exc:
        raise TrajectoryFormatError(f"Malformed header: {exc}") from exc
    if width <= 0 or height <= 0 or step_count <= 0:
        raise TrajectoryFormatError(
            f"Header dimensions must be positive, got width={width}, height={height}, steps={step_count}"
        )
    return width, height, time_step, step_count


def read_trajectory(source: Union[str, os.PathLike, IO]) -> Trajectory:
    """
    Parse a trajectory stream.

    Parameters
    ----------
    source : path or readable stream
        Text produced by TrajectoryWriter

    Returns
    -------
    Trajectory
        Positions (S, N, 2) and the initial velocity snapshot (N, 2);
        death flags are not recorded in the stream, so ``dead`` is None

    Raises
    ------
    TrajectoryFormatError
        If the header is malformed or the row count does not match
        ``4 + N + S*N``
    """
    with _open_source(source) as stream:
        lines = stream.read().splitlines()

    width, height, time_step, step_count = _parse_header(lines[:4])
    n_points = width * height
    expected = 4 + n_points + step_count * n_points
    if len(lines) != expected:
        raise TrajectoryFormatError(
            f"Expected {expected} lines for a {width}x{height} lattice over {step_count} steps, "
            f"found {len(lines)}"
        )

    try:
        rows = np.loadtxt(lines[4:], delimiter="\t", dtype=np.float64, ndmin=2)
    except ValueError as exc:
        raise TrajectoryFormatError(f"Malformed data row: {exc}") from exc
    if rows.shape[1] != 2:
        raise TrajectoryFormatError(f"Data rows must have 2 columns, got {rows.shape[1]}")

    return Trajectory(
        positions=rows[n_points:].reshape(step_count, n_points, 2),
        initial_velocities=rows[:n_points],
        width=width,
        height=height,
        time_step=time_step,
        metadata={'source': str(source) if isinstance(source, (str, os.PathLike)) else 'stream'},
    )

# fieldtrace/io/writer.py
"""
Trajectory stream writer.

Line-oriented text records, written sequentially:

    width
    height
    time_step                       (6 decimals)
    step_count
    vx<TAB>vy                       x width*height, initial field snapshot
    x<TAB>y                         x width*height, once per step

Rows are in row-major lattice order. Blocks follow each other with no
separator lines.
"""

from __future__ import annotations
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union, IO
import io
import os

import numpy as np

from ..errors import SinkWriteError
from ..utils.jax_utils import to_numpy

SinkLike = Union[str, os.PathLike, IO]

ROW_FORMAT = "%f"
DELIMITER = "\t"


def _is_binary(stream) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return "b" in getattr(stream, "mode", "")


def format_rows(values) -> str:
    """Render an (N, 2) array as N tab-separated, newline-terminated rows."""
    arr = np.asarray(to_numpy(values), dtype=np.float64).reshape(-1, 2)
    buf = io.StringIO()
    np.savetxt(buf, arr, fmt=ROW_FORMAT, delimiter=DELIMITER, newline="\n")
    return buf.getvalue()


class TrajectoryWriter:
    """
    Writes trajectory records to a sequential sink.

    Accepts text or binary streams. Any failure while writing is raised as
    SinkWriteError; nothing is retried.
    """

    def __init__(self, stream: IO):
        if not hasattr(stream, "write"):
            raise TypeError("stream must provide write()")
        self.stream = stream
        self.binary = _is_binary(stream)
        self.lines_written = 0
        self.records_written = 0

    def _write(self, text: str, n_lines: int) -> None:
        try:
            self.stream.write(text.encode("ascii") if self.binary else text)
        except (OSError, ValueError) as exc:
            raise SinkWriteError(
                f"Output sink is not writable: {exc}",
                records_written=self.records_written,
                context={"lines_written": self.lines_written},
                cause=exc,
            ) from exc
        self.lines_written += n_lines
        self.records_written += 1

    def write_header(self, params) -> None:
        """Write width, height, time step and step count, one per line."""
        header = (
            f"{params.width}\n"
            f"{params.height}\n"
            f"{params.time_step:f}\n"
            f"{params.step_count}\n"
        )
        self._write(header, 4)

    def write_velocities(self, velocities) -> None:
        """Write the initial field snapshot, one ``vx<TAB>vy`` row per point."""
        text = format_rows(velocities)
        self._write(text, text.count("\n"))

    def write_positions(self, positions) -> None:
        """Write one position block, one ``x<TAB>y`` row per point."""
        text = format_rows(positions)
        self._write(text, text.count("\n"))

    def flush(self) -> None:
        try:
            self.stream.flush()
        except (OSError, ValueError) as exc:
            raise SinkWriteError(
                f"Output sink could not be flushed: {exc}",
                records_written=self.records_written,
                cause=exc,
            ) from exc


@contextmanager
def open_sink(target: SinkLike) -> Iterator[IO]:
    """
    Scoped access to an output sink.

    A path is opened for writing (parent directories created) and closed on
    every exit path. An already-open stream is yielded as-is and stays open.
    """
    if not isinstance(target, (str, os.PathLike)):
        yield target
        return

    path = Path(target)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(path, "w", encoding="ascii", newline="\n")
    except OSError as exc:
        raise SinkWriteError(
            f"Cannot open output sink {path}: {exc}", context={"path": str(path)}, cause=exc
        ) from exc

    try:
        yield handle
    finally:
        try:
            handle.close()
        except OSError as exc:
            raise SinkWriteError(
                f"Cannot close output sink {path}: {exc}", context={"path": str(path)}, cause=exc
            ) from exc


def write_trajectory(trajectory, sink: SinkLike) -> int:
    """
    Serialize an in-memory Trajectory to the stream format.

    Returns
    -------
    int
        Number of lines written
    """
    with open_sink(sink) as stream:
        writer = TrajectoryWriter(stream)
        writer.write_header(_HeaderView(trajectory))
        writer.write_velocities(trajectory.initial_velocities)
        for block in trajectory.positions:
            writer.write_positions(block)
        writer.flush()
        return writer.lines_written


class _HeaderView:
    """Header fields of a Trajectory under the SimulationParameters names."""

    def __init__(self, trajectory):
        self.width = trajectory.width
        self.height = trajectory.height
        self.time_step = trajectory.time_step
        self.step_count = trajectory.step_count

# fieldtrace/io/__init__.py
"""
fieldtrace I/O: the flat trajectory text stream.

Main entry points:
- TrajectoryWriter / open_sink - sequential record emission
- write_trajectory() - serialize an in-memory Trajectory
- read_trajectory() - parse a stream back into a Trajectory
"""

from .writer import (
    TrajectoryWriter,
    open_sink,
    format_rows,
    write_trajectory,
)
from .reader import read_trajectory

__all__ = [
    "TrajectoryWriter",
    "open_sink",
    "format_rows",
    "write_trajectory",
    "read_trajectory",
]

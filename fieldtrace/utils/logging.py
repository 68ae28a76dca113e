# fieldtrace/utils/logging.py
"""
Logging utilities: timers, memory monitoring, and progress tracking.

Lightweight reporting helpers used by the simulator and the CLI. Progress
goes to stderr so a trajectory stream written to stdout stays clean.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, Callable, Protocol, Tuple
import time
import sys
from contextlib import contextmanager

import psutil
from tqdm import tqdm


class ProgressCallback(Protocol):
    """Protocol for progress callbacks used during long operations."""
    def __call__(self, step: int, total: int, **kwargs: Any) -> None:
        """Called periodically during operations to report progress."""
        ...


class Timer:
    """
    Simple timer for performance monitoring.

    Can be used as a context manager or manually started/stopped.
    Tracks wall time and, optionally, the resident memory delta.
    """

    def __init__(self, name: str = "Timer", track_memory: bool = False, quiet: bool = False):
        self.name = name
        self.track_memory = track_memory
        self.quiet = quiet
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.start_memory: Optional[Dict[str, Any]] = None
        self.end_memory: Optional[Dict[str, Any]] = None

    def start(self) -> None:
        """Start the timer."""
        self.start_time = time.perf_counter()
        if self.track_memory:
            self.start_memory = memory_info()

    def stop(self) -> float:
        """Stop the timer and return elapsed time in seconds."""
        if self.start_time is None:
            raise RuntimeError("Timer not started")
        self.end_time = time.perf_counter()
        if self.track_memory:
            self.end_memory = memory_info()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    @property
    def memory_delta(self) -> Optional[Dict[str, Any]]:
        """Get memory usage delta (if tracking enabled)."""
        if not self.track_memory or self.start_memory is None or self.end_memory is None:
            return None
        return {
            key: self.end_memory[key] - self.start_memory[key]
            for key in self.start_memory
            if key in self.end_memory
        }

    def __enter__(self) -> 'Timer':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
        if not self.quiet:
            self.report()

    def report(self) -> None:
        """Print a timing report."""
        print(f"{self.name}: {self.elapsed:.6f}s")
        if self.track_memory and self.memory_delta is not None:
            print(f"  Memory delta: {self.memory_delta['rss_mb']:.1f} MB")


@contextmanager
def timeit(name: str = "Operation", track_memory: bool = False):
    """
    Context manager for timing operations.

    Example
    -------
    >>> with timeit("Simulation"):
    ...     simulator.run(sink)
    """
    timer = Timer(name, track_memory=track_memory)
    with timer:
        yield timer


def memory_info() -> Dict[str, float]:
    """
    Get current process memory usage.

    Returns
    -------
    dict
        Keys 'rss_mb', 'vms_mb' for this process and 'available_mb' system-wide
    """
    mem = psutil.Process().memory_info()
    return {
        "rss_mb": mem.rss / 1024 / 1024,
        "vms_mb": mem.vms / 1024 / 1024,
        "available_mb": psutil.virtual_memory().available / 1024 / 1024,
    }


def create_progress_callback(
    name: str = "Progress",
    update_every: int = 100,
    show_rate: bool = True,
) -> ProgressCallback:
    """
    Create a progress callback for long-running operations.

    Parameters
    ----------
    name : str
        Name to show in progress messages
    update_every : int
        Update frequency (every N steps)
    show_rate : bool
        Whether to show processing rate

    Returns
    -------
    ProgressCallback
        Function that can be called with (step, total, **kwargs)
    """
    start_time = time.perf_counter()

    def callback(step: int, total: int, **kwargs: Any) -> None:
        if step % update_every != 0 and step != total:
            return

        elapsed = time.perf_counter() - start_time
        percent = 100.0 * step / max(1, total)

        msg = f"{name}: {step}/{total} ({percent:.1f}%)"

        if show_rate and elapsed > 0:
            msg += f", {step / elapsed:.1f} steps/s"

        if kwargs:
            extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            msg += f", {extra}"

        print(f"\r{msg}", end="", file=sys.stderr, flush=True)

        if step == total:
            print(file=sys.stderr)

    return callback


def make_progress(total: int, desc: str = "Simulating", style: str = "auto",
                  update_every: float = 0.05) -> Tuple[Callable[[int], None], Callable[[], None]]:
    """
    Create a progress reporter.

    Returns a tuple ``(update_fn(n=1), close_fn())``. ``style`` is one of
    'auto'/'tqdm' (tqdm bar), 'simple' (single-line percentage) or 'none'.
    """
    style = (style or "auto").lower()

    if style in ("auto", "tqdm"):
        bar = tqdm(total=total, desc=desc, leave=True)
        return (lambda n=1: bar.update(n)), bar.close

    if style == "none":
        return (lambda n=1: None), (lambda: None)

    state = {'done': 0, 'shown': -1.0}

    def update_simple(n: int = 1) -> None:
        state['done'] += n
        pct = state['done'] / max(total, 1)
        if pct - state['shown'] >= update_every or state['done'] == total:
            state['shown'] = pct
            sys.stderr.write(f"\r{desc}: {pct * 100:.1f}%")
            sys.stderr.flush()

    def close_simple() -> None:
        sys.stderr.write("\n")
        sys.stderr.flush()

    return update_simple, close_simple

"""Tests for timers, progress reporting and backend helpers."""

import numpy as np
import pytest

from fieldtrace.integrators import euler_step
from fieldtrace.utils import (
    Timer,
    asarray,
    create_progress_callback,
    get_backend_name,
    make_progress,
    maybe_jit,
    memory_info,
    timeit,
    to_numpy,
)


class TestTimer:
    """Tests for Timer and timeit."""

    def test_context_manager(self, capsys):
        with Timer("Block") as timer:
            sum(range(1000))
        assert timer.elapsed > 0
        assert "Block:" in capsys.readouterr().out

    def test_quiet(self, capsys):
        with Timer("Block", quiet=True):
            pass
        assert capsys.readouterr().out == ""

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_elapsed_before_start(self):
        assert Timer().elapsed == 0.0

    def test_memory_delta(self):
        with Timer("Block", track_memory=True, quiet=True) as timer:
            pass
        assert set(timer.memory_delta) == {"rss_mb", "vms_mb", "available_mb"}

    def test_memory_delta_untracked(self):
        with Timer("Block", quiet=True) as timer:
            pass
        assert timer.memory_delta is None

    def test_timeit(self, capsys):
        with timeit("Operation") as timer:
            pass
        assert isinstance(timer, Timer)
        assert "Operation:" in capsys.readouterr().out


def test_memory_info():
    info = memory_info()
    assert info["rss_mb"] > 0
    assert info["available_mb"] > 0


class TestProgress:
    """Tests for progress reporters; all output goes to stderr."""

    def test_simple(self, capsys):
        update, close = make_progress(4, desc="Work", style="simple")
        for _ in range(4):
            update(1)
        close()
        captured = capsys.readouterr()
        assert "Work: 100.0%" in captured.err
        assert captured.out == ""

    def test_none(self, capsys):
        update, close = make_progress(4, style="none")
        update(1)
        close()
        assert capsys.readouterr().err == ""

    def test_tqdm(self, capsys):
        update, close = make_progress(3, desc="Bar", style="tqdm")
        for _ in range(3):
            update(1)
        close()
        assert "Bar" in capsys.readouterr().err

    def test_callback(self, capsys):
        callback = create_progress_callback("Steps", update_every=2, show_rate=False)
        for step in range(1, 5):
            callback(step, 4, dead=0)
        err = capsys.readouterr().err
        assert "Steps: 2/4 (50.0%), dead=0" in err
        assert "Steps: 4/4 (100.0%), dead=0" in err
        assert "1/4" not in err


class TestBackend:
    """Tests for the array backend helpers."""

    def test_backend_name(self):
        assert get_backend_name() in ("jax", "numpy")

    def test_asarray_round_trip(self):
        arr = to_numpy(asarray([[1.0, 2.0]], dtype=np.float64))
        assert isinstance(arr, np.ndarray)
        np.testing.assert_array_equal(arr, [[1.0, 2.0]])

    def test_maybe_jit_disabled(self):
        def fn(x):
            return x
        assert maybe_jit(fn, enable=False) is fn


def test_euler_step():
    """x + v * dt, returning the sampled velocity too."""
    x = np.array([[0.0, 1.0], [2.0, -1.0]])
    x_next, v = euler_step(x, 0.5, lambda p: p * 2.0)
    np.testing.assert_allclose(np.asarray(v), [[0.0, 2.0], [4.0, -2.0]])
    np.testing.assert_allclose(np.asarray(x_next), [[0.0, 2.0], [4.0, -2.0]])

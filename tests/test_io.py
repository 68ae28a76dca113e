"""Tests for the trajectory stream writer and reader."""

import io

import numpy as np
import pytest

import fieldtrace as ft
from fieldtrace.io import TrajectoryWriter, format_rows, open_sink


class FailingStream(io.StringIO):
    """Text stream that fails after a fixed number of writes."""

    def __init__(self, fail_after):
        super().__init__()
        self.fail_after = fail_after
        self.calls = 0

    def write(self, text):
        self.calls += 1
        if self.calls > self.fail_after:
            raise OSError("disk full")
        return super().write(text)


class TestStreamFormat:
    """Tests for the emitted record layout."""

    def test_single_point_run(self, unit_field):
        """One point, one step of a (1, 1) field."""
        params = ft.SimulationParameters(width=1, height=1, time_step=1.0, step_count=1)
        sink = io.StringIO()
        final = ft.LatticeSimulator(params=params, velocity_field=unit_field).run(sink)

        assert sink.getvalue() == (
            "1\n"
            "1\n"
            "1.000000\n"
            "1\n"
            "1.000000\t1.000000\n"
            "1.000000\t1.000000\n"
        )
        assert final.n_dead == 0

    def test_default_header(self):
        """Header fields are one per line, time step with six decimals."""
        sink = io.StringIO()
        TrajectoryWriter(sink).write_header(ft.SimulationParameters())
        assert sink.getvalue() == "41\n41\n0.010000\n1000\n"

    def test_line_count(self, small_params):
        """4 header lines, one snapshot block and one block per step."""
        sink = io.StringIO()
        ft.LatticeSimulator(params=small_params).run(sink)

        lines = sink.getvalue().splitlines()
        assert len(lines) == 4 + 6 + 4 * 6 == small_params.total_lines
        assert all(len(line.split("\t")) == 2 for line in lines[4:])
        assert sink.getvalue().endswith("\n")

    def test_blocks_match_track(self, small_params):
        """The stream and the in-memory record carry the same values."""
        sink = io.StringIO()
        ft.LatticeSimulator(params=small_params).run(sink)
        trajectory = ft.LatticeSimulator(params=small_params).track()

        lines = sink.getvalue().splitlines()
        assert lines[4:10] == format_rows(trajectory.initial_velocities).splitlines()
        assert lines[-6:] == format_rows(trajectory.final_positions).splitlines()

    def test_format_rows(self):
        """Six decimals, tab-separated."""
        assert format_rows(np.array([[1.5, -0.25], [10.0, 3.1415926]])) == (
            "1.500000\t-0.250000\n10.000000\t3.141593\n"
        )

    def test_write_trajectory(self, small_params):
        """Serializing a recorded trajectory reproduces the run's stream."""
        sink = io.StringIO()
        ft.LatticeSimulator(params=small_params).run(sink)
        trajectory = ft.LatticeSimulator(params=small_params).track()

        replay = io.StringIO()
        n_lines = ft.write_trajectory(trajectory, replay)
        assert n_lines == small_params.total_lines
        assert replay.getvalue() == sink.getvalue()


class TestSinks:
    """Tests for sink ownership and error handling."""

    def test_caller_stream_left_open(self, small_params):
        sink = io.StringIO()
        ft.LatticeSimulator(params=small_params).run(sink)
        assert not sink.closed

    def test_binary_stream(self, small_params):
        """Binary sinks receive the same ASCII bytes."""
        text_sink = io.StringIO()
        ft.LatticeSimulator(params=small_params).run(text_sink)
        binary_sink = io.BytesIO()
        ft.LatticeSimulator(params=small_params).run(binary_sink)

        assert binary_sink.getvalue() == text_sink.getvalue().encode("ascii")

    def test_path_sink(self, small_params, output_path):
        """A path is created, written and closed."""
        ft.LatticeSimulator(params=small_params).run(output_path)

        assert output_path.exists()
        assert len(output_path.read_text().splitlines()) == small_params.total_lines

    def test_str_path_sink(self, small_params, output_path):
        ft.LatticeSimulator(params=small_params).run(str(output_path))
        assert output_path.exists()

    def test_open_sink_closes_path(self, output_path):
        with open_sink(output_path) as stream:
            stream.write("x\n")
        assert stream.closed

    def test_open_sink_closes_on_error(self, output_path):
        with pytest.raises(RuntimeError):
            with open_sink(output_path) as stream:
                raise RuntimeError("boom")
        assert stream.closed

    def test_closed_stream(self, small_params):
        """Writing to a closed stream is a SinkWriteError."""
        sink = io.StringIO()
        sink.close()
        with pytest.raises(ft.SinkWriteError) as excinfo:
            ft.LatticeSimulator(params=small_params).run(sink)
        assert excinfo.value.records_written == 0
        assert isinstance(excinfo.value, OSError)

    def test_failure_mid_run(self, small_params):
        """The run stops at the first failed write."""
        sink = FailingStream(fail_after=3)
        sim = ft.LatticeSimulator(params=small_params)
        with pytest.raises(ft.SinkWriteError) as excinfo:
            sim.run(sink)

        # header, snapshot and one position block made it out
        assert excinfo.value.records_written == 3
        assert excinfo.value.context['lines_written'] == 4 + 6 + 6
        assert isinstance(excinfo.value.cause, OSError)
        assert sim.steps_taken == 2

    def test_unopenable_path(self, tmp_path, small_params):
        """A path under a regular file cannot be opened."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(ft.SinkWriteError):
            ft.LatticeSimulator(params=small_params).run(blocker / "out.txt")

    def test_writer_requires_stream(self):
        with pytest.raises(TypeError):
            TrajectoryWriter(object())


class TestReader:
    """Tests for read_trajectory()."""

    def test_read_back(self, small_params, output_path):
        """Reading a written run recovers its values to six decimals."""
        trajectory = ft.LatticeSimulator(params=small_params).track()
        ft.write_trajectory(trajectory, output_path)

        restored = ft.read_trajectory(output_path)
        assert (restored.width, restored.height, restored.step_count) == (3, 2, 4)
        assert restored.time_step == pytest.approx(0.1)
        assert restored.dead is None
        np.testing.assert_allclose(restored.positions, trajectory.positions, atol=1e-6)
        np.testing.assert_allclose(restored.initial_velocities, trajectory.initial_velocities, atol=1e-6)

    def test_read_binary_stream(self, small_params):
        """Binary sources are decoded and left open."""
        sink = io.BytesIO()
        ft.LatticeSimulator(params=small_params).run(sink)
        sink.seek(0)

        restored = ft.read_trajectory(sink)
        assert restored.positions.shape == (4, 6, 2)
        assert not sink.closed

    def test_truncated_stream(self, small_params):
        sink = io.StringIO()
        ft.LatticeSimulator(params=small_params).run(sink)
        truncated = "\n".join(sink.getvalue().splitlines()[:-1]) + "\n"

        with pytest.raises(ft.TrajectoryFormatError):
            ft.read_trajectory(io.StringIO(truncated))

    def test_short_header(self):
        with pytest.raises(ft.TrajectoryFormatError) as excinfo:
            ft.read_trajectory(io.StringIO("3\n2\n"))
        assert excinfo.value.line_number == 3

    def test_malformed_header(self):
        with pytest.raises(ft.TrajectoryFormatError):
            ft.read_trajectory(io.StringIO("3\nwide\n0.1\n1\n"))

    def test_malformed_row(self):
        text = "1\n1\n1.000000\n1\n1.000000\t1.000000\nnan-ish\tvalue\n"
        with pytest.raises(ft.TrajectoryFormatError):
            ft.read_trajectory(io.StringIO(text))

    def test_wrong_column_count(self):
        text = "1\n1\n1.000000\n1\n1.0\t1.0\t1.0\n1.0\t1.0\t1.0\n"
        with pytest.raises(ft.TrajectoryFormatError):
            ft.read_trajectory(io.StringIO(text))

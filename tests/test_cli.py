"""Tests for the command-line interface."""

import pytest

from fieldtrace.__main__ import build_parser, load_config_file, main
import fieldtrace as ft


SMALL = ["--width", "3", "--height", "2", "--steps", "2"]


class TestMain:
    """Tests for main() exit codes and output routing."""

    def test_writes_file(self, output_path, capsys):
        assert main(SMALL + ["--output", str(output_path)]) == 0

        assert len(output_path.read_text().splitlines()) == 4 + 6 + 12
        out = capsys.readouterr().out
        assert "Simulating points...." in out
        assert "Dead:      0/6" in out

    def test_default_output_path(self, tmp_path, monkeypatch):
        """Without --output the run lands in ./data/simulation_data.txt."""
        monkeypatch.chdir(tmp_path)
        assert main(SMALL + ["--quiet"]) == 0
        assert (tmp_path / "data" / "simulation_data.txt").exists()

    def test_stdout_stream(self, capsys):
        """With --output - stdout carries only the stream."""
        assert main(SMALL + ["--output", "-"]) == 0

        captured = capsys.readouterr()
        lines = captured.out.splitlines()
        assert lines[:4] == ["3", "2", "0.010000", "2"]
        assert len(lines) == 22
        assert "Simulating points...." in captured.err

    def test_field_option(self, capsys):
        assert main(SMALL + ["--field", "sine_sine", "--output", "-", "--quiet"]) == 0

        lines = capsys.readouterr().out.splitlines()
        vx, vy = (float(v) for v in lines[4].split("\t"))
        ex, ey = ft.get_field("sine_sine").evaluate(-1.0, -1.0)
        assert vx == pytest.approx(ex, abs=1e-6)
        assert vy == pytest.approx(ey, abs=1e-6)

    def test_quiet(self, output_path, capsys):
        assert main(SMALL + ["--output", str(output_path), "--quiet"]) == 0
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize("argv", [
        ["--width", "0"],
        ["--steps", "-5"],
        ["--time-step", "0"],
        ["--field", "vortex"],
    ])
    def test_configuration_error(self, argv, output_path, capsys):
        """Invalid inputs exit with status 2 before writing anything."""
        assert main(argv + ["--output", str(output_path)]) == 2
        assert "Configuration error" in capsys.readouterr().err
        assert not output_path.exists()

    def test_sink_error(self, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        assert main(SMALL + ["--output", str(blocker / "out.txt"), "--quiet"]) == 1
        assert "Output error" in capsys.readouterr().err

    def test_list_fields(self, capsys):
        assert main(["--list-fields"]) == 0
        out = capsys.readouterr().out
        for name in ft.list_fields():
            assert name in out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert ft.__version__ in capsys.readouterr().out

    def test_verbose(self, output_path, capsys):
        assert main(SMALL + ["--output", str(output_path), "--verbose"]) == 0
        out = capsys.readouterr().out
        assert "Backend:" in out
        assert "Memory:" in out

    def test_progress_flag(self, output_path, capsys):
        assert main(SMALL + ["--output", str(output_path), "--progress", "simple", "--quiet"]) == 0
        assert "Simulating: 100.0%" in capsys.readouterr().err


class TestConfigFile:
    """Tests for --config files."""

    def _write(self, path, body):
        path.write_text(f"config = {body}\n")
        return path

    def test_config_values(self, tmp_path, output_path):
        cfg = self._write(tmp_path / "cfg.py", {
            "width": 2, "height": 2, "step_count": 3, "output": str(output_path),
        })
        assert main(["--config", str(cfg), "--quiet"]) == 0
        assert len(output_path.read_text().splitlines()) == 4 + 4 + 12

    def test_flags_override_config(self, tmp_path, output_path):
        cfg = self._write(tmp_path / "cfg.py", {
            "width": 2, "height": 2, "step_count": 3, "output": str(output_path),
        })
        assert main(["--config", str(cfg), "--steps", "1", "--quiet"]) == 0
        assert output_path.read_text().splitlines()[3] == "1"

    def test_unknown_key(self, tmp_path, capsys):
        cfg = self._write(tmp_path / "cfg.py", {"grid": 5})
        assert main(["--config", str(cfg)]) == 2
        assert "grid" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        assert main(["--config", str(tmp_path / "nope.py")]) == 2

    def test_no_config_dict(self, tmp_path):
        path = tmp_path / "cfg.py"
        path.write_text("settings = {}\n")
        with pytest.raises(ft.ConfigurationError):
            load_config_file(path)

    def test_package_settings_applied(self, tmp_path, output_path, capsys):
        cfg = self._write(tmp_path / "cfg.py", {
            "width": 2, "height": 2, "step_count": 2, "output": str(output_path),
            "show_progress": True, "progress_style": "simple",
        })
        assert main(["--config", str(cfg), "--quiet"]) == 0
        assert "Simulating: 100.0%" in capsys.readouterr().err


def test_parser_defaults():
    """Unset flags stay None so config files are not overridden."""
    args = build_parser().parse_args([])
    assert args.width is None
    assert args.step_count is None
    assert args.output is None
    assert args.progress_style is None

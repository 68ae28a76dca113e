#!/usr/bin/env python3
"""
fieldtrace command-line interface.

Usage:
    python -m fieldtrace                         # Reference 41x41 run, 1000 steps
    python -m fieldtrace --config myconfig.py    # Run with a config file
    python -m fieldtrace --steps 200 --field sine_cosine --output out.txt
    python -m fieldtrace --version               # Show version
"""

import argparse
import importlib.util
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_OUTPUT = "./data/simulation_data.txt"

# Config keys routed to each consumer
_SIMULATION_KEYS = ("width", "height", "time_step", "step_count", "x_limit", "y_limit")
_RUN_KEYS = ("field", "output")
_PACKAGE_KEYS = ("use_jax_jit", "show_progress", "progress_style", "verbose")


def get_version():
    """Get fieldtrace version."""
    from fieldtrace import __version__
    return __version__


def load_config_file(config_path) -> Dict[str, Any]:
    """Load configuration from a Python file defining a 'config' dict."""
    from fieldtrace.errors import ConfigurationError

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}", parameter="config")

    spec = importlib.util.spec_from_file_location("user_config", config_path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot load config from {config_path}", parameter="config")

    config_module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(config_module)

    config = getattr(config_module, "config", None)
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Config file {config_path} must define a 'config' dictionary", parameter="config"
        )

    unknown = sorted(set(config) - set(_SIMULATION_KEYS + _RUN_KEYS + _PACKAGE_KEYS))
    if unknown:
        raise ConfigurationError(f"Unknown config keys in {config_path}: {unknown}", parameter="config")
    return dict(config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fieldtrace',
        description='fieldtrace - lattice advection through an analytic vector field',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fieldtrace                          # Reference run
  python -m fieldtrace --list-fields            # Show available fields
  python -m fieldtrace --config myconfig.py     # Run with a config file
  python -m fieldtrace --output -               # Write the stream to stdout

Configuration:
  A config file is a Python file defining a 'config' dictionary.
  Command-line flags override config file values.
  See config_example.py for available options.
"""
    )

    parser.add_argument('--version', action='version', version=f'fieldtrace {get_version()}')
    parser.add_argument('--config', type=str, help='Path to configuration file (Python file with config dict)')
    parser.add_argument('--width', type=int, help='Number of lattice points along x (default 41)')
    parser.add_argument('--height', type=int, help='Number of lattice points along y (default 41)')
    parser.add_argument('--time-step', dest='time_step', type=float, help='Integration time step (default 0.01)')
    parser.add_argument('--steps', dest='step_count', type=int, help='Number of steps to simulate (default 1000)')
    parser.add_argument('--x-limit', dest='x_limit', type=float, help='Death limit on |x| (default 2*width)')
    parser.add_argument('--y-limit', dest='y_limit', type=float, help='Death limit on |y| (default 2*height)')
    parser.add_argument('--field', type=str, help='Velocity field name (see --list-fields)')
    parser.add_argument('--output', type=str, help=f"Output path, or '-' for stdout (default {DEFAULT_OUTPUT})")
    parser.add_argument('--progress', dest='progress_style', choices=['auto', 'tqdm', 'simple', 'none'],
                        help='Show progress while stepping')
    parser.add_argument('--list-fields', action='store_true', help='List available velocity fields and exit')
    parser.add_argument('--verbose', action='store_true', help='Show backend and memory details')
    parser.add_argument('--quiet', action='store_true', help='Suppress banner and summary')
    return parser


def _merge_settings(args: argparse.Namespace) -> Dict[str, Any]:
    settings: Dict[str, Any] = {}
    if args.config:
        settings.update(load_config_file(args.config))

    for key in _SIMULATION_KEYS + _RUN_KEYS:
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value

    if args.verbose:
        settings['verbose'] = True

    if args.progress_style is not None:
        settings['progress_style'] = args.progress_style
        settings['show_progress'] = args.progress_style != 'none'
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for fieldtrace. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Import here to avoid slow startup for --version
    import fieldtrace as ft
    from fieldtrace.utils.logging import Timer

    if args.list_fields:
        for name in ft.list_fields():
            print(f"{name:14s} {ft.get_field(name).description}")
        return 0

    try:
        settings = _merge_settings(args)
        package_settings = {k: settings[k] for k in _PACKAGE_KEYS if k in settings}
        if package_settings:
            ft.configure(**package_settings)

        params = ft.SimulationParameters.from_dict(
            {k: settings[k] for k in _SIMULATION_KEYS if k in settings}
        )
        velocity_field = ft.get_field(settings.get('field', ft.DEFAULT_FIELD))
    except ValueError as e:
        # ConfigurationError is a ValueError; PackageConfig raises plain ValueError
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    output = settings.get('output', DEFAULT_OUTPUT)
    to_stdout = output == '-'
    info = sys.stderr if to_stdout else sys.stdout
    quiet = args.quiet
    verbose = ft.get_config().verbose and not quiet

    if not quiet:
        print("Simulating points....", file=info)
    if verbose:
        info_dict = ft.get_config().get_system_info()
        print(f"Backend:   {info_dict['backend']} (JAX {info_dict['jax_version'] or 'not installed'})", file=info)

    simulator = ft.LatticeSimulator(params=params, velocity_field=velocity_field)
    timer = Timer("Simulation", track_memory=verbose, quiet=True)
    try:
        with timer:
            final = simulator.run(sys.stdout if to_stdout else output)
    except ft.SinkWriteError as e:
        print(f"Output error: {e}", file=sys.stderr)
        return 1

    if not quiet:
        print("=" * 60, file=info)
        print(f"Field:     {velocity_field.name} ({velocity_field.description})", file=info)
        print(f"Lattice:   {params.width} x {params.height} ({params.n_points} points)", file=info)
        print(f"Steps:     {params.step_count} (dt = {params.time_step:g})", file=info)
        print(f"Dead:      {final.n_dead}/{final.n_points}", file=info)
        print(f"Output:    {'<stdout>' if to_stdout else output}", file=info)
        print(f"Runtime:   {timer.elapsed:.2f} s", file=info)
        if verbose and timer.memory_delta is not None:
            print(f"Memory:    {timer.memory_delta['rss_mb']:+.1f} MB RSS", file=info)
        print("=" * 60, file=info)
    return 0


if __name__ == "__main__":
    sys.exit(main())

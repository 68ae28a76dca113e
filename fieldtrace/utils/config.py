# fieldtrace/utils/config.py
"""
Global package configuration.

Provides centralized runtime settings for step compilation, progress
reporting and verbosity. Simulation inputs (grid size, time step, step
count, death limits) live in ``SimulationParameters``, not here.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Dict, Any
import warnings

from .jax_utils import JAX_AVAILABLE, get_backend_name, get_jax_version

PROGRESS_STYLES = ("auto", "tqdm", "simple", "none")


@dataclass
class PackageConfig:
    """
    Global configuration for the fieldtrace package.

    Controls how the simulator executes and reports, never what it computes:
    every setting here leaves the recorded trajectory unchanged.
    """
    # Performance settings
    use_jax_jit: bool = True            # JIT the lattice step when JAX is active

    # Progress and monitoring
    show_progress: bool = False         # Report progress while stepping
    progress_style: str = "auto"        # 'auto' | 'tqdm' | 'simple' | 'none'
    progress_desc: str = "Simulating"
    verbose: bool = False               # Verbose CLI output

    def __post_init__(self):
        self._validate_config()

    def _validate_config(self):
        """Validate configuration settings."""
        if self.progress_style not in PROGRESS_STYLES:
            raise ValueError(
                f"progress_style must be one of {PROGRESS_STYLES}, got '{self.progress_style}'"
            )

        if self.use_jax_jit and not JAX_AVAILABLE:
            # Harmless: the NumPy path simply runs uncompiled
            self.use_jax_jit = False

    def get_system_info(self) -> Dict[str, Any]:
        """Get backend information and the active settings."""
        return {
            "backend": get_backend_name(),
            "jax_available": JAX_AVAILABLE,
            "jax_version": get_jax_version(),
            "current_config": {f.name: getattr(self, f.name) for f in fields(self)},
        }


# Global configuration instance
_global_config = PackageConfig()


def get_config() -> PackageConfig:
    """Get global package configuration."""
    return _global_config


def configure(**kwargs) -> None:
    """
    Configure package settings.

    Parameters
    ----------
    **kwargs : dict
        Configuration parameters to update
    """
    for key, value in kwargs.items():
        if hasattr(_global_config, key):
            setattr(_global_config, key, value)
        else:
            warnings.warn(f"Unknown configuration parameter: {key}")

    # Re-validate
    _global_config._validate_config()


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = PackageConfig()

# fieldtrace/utils/__init__.py
"""
Utilities for fieldtrace.

Contains:
- jax_utils: backend detection, JAX guards, jit helper
- config: global runtime settings
- logging: timers, memory monitoring, progress tracking
"""

from .jax_utils import (
    JAX_AVAILABLE,
    get_backend_name,
    get_jax_version,
    to_numpy,
    asarray,
    maybe_jit,
)

from .config import (
    PackageConfig,
    get_config,
    configure,
    reset_config,
)

from .logging import (
    Timer,
    timeit,
    memory_info,
    create_progress_callback,
    make_progress,
    ProgressCallback,
)

__all__ = [
    # jax_utils
    "JAX_AVAILABLE",
    "get_backend_name",
    "get_jax_version",
    "to_numpy",
    "asarray",
    "maybe_jit",
    # config
    "PackageConfig",
    "get_config",
    "configure",
    "reset_config",
    # logging
    "Timer",
    "timeit",
    "memory_info",
    "create_progress_callback",
    "make_progress",
    "ProgressCallback",
]

# fieldtrace/utils/jax_utils.py
from __future__ import annotations
import os
from typing import Any, Callable, Optional, Sequence

import numpy as np
import warnings

_BACKEND = os.environ.get("FIELDTRACE_BACKEND", "auto").lower()

JAX_AVAILABLE = False
jax = None  # type: ignore
jnp = None  # type: ignore
if _BACKEND != "numpy":
    try:
        import jax
        import jax.numpy as jnp
        from jax import jit as _jit
        # Lattice positions are double precision throughout
        jax.config.update("jax_enable_x64", True)
        JAX_AVAILABLE = True
    except Exception as e:
        JAX_AVAILABLE = False
        jax = None  # type: ignore
        jnp = None  # type: ignore
        if _BACKEND == "jax":
            warnings.warn(f"FIELDTRACE_BACKEND=jax but JAX could not be imported ({e}); using NumPy")


def get_backend_name() -> str:
    """Return 'jax' when the JAX backend is active, else 'numpy'."""
    return "jax" if JAX_AVAILABLE else "numpy"


def get_jax_version() -> Optional[str]:
    """Return the JAX version string if available, else None."""
    return getattr(jax, "__version__", None) if JAX_AVAILABLE else None


def to_numpy(x: Any) -> np.ndarray:
    """Convert JAX/NumPy arrays to NumPy; leaves Python scalars unchanged."""
    return np.asarray(x)


def asarray(x: Any, dtype: Any = None):
    """Create an array with JAX if available, else NumPy."""
    if JAX_AVAILABLE:
        return jnp.asarray(x, dtype=dtype)
    return np.asarray(x, dtype=dtype)


def maybe_jit(fn: Callable, enable: bool = True, static_argnums: Optional[Sequence[int]] = None):
    """
    JIT-wrap `fn` with JAX when available and enabled; otherwise return `fn` unchanged.
    """
    if JAX_AVAILABLE and enable:
        return _jit(fn, static_argnums=static_argnums)
    return fn

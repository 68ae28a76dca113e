#!/usr/bin/env python3
"""
Example Configuration File for fieldtrace

Copy this file and modify the parameters for your specific use case.

Usage:
    python run.py --config config_example.py
"""

# =============================================================================
# CONFIGURATION
# =============================================================================

config = {
    # -------------------------------------------------------------------------
    # Lattice
    # -------------------------------------------------------------------------
    'width': 41,                    # Lattice points along x
    'height': 41,                   # Lattice points along y

    # -------------------------------------------------------------------------
    # Integration
    # -------------------------------------------------------------------------
    'time_step': 0.01,              # Forward Euler step size
    'step_count': 1000,             # Number of steps to record
    'field': 'cosine_sine',         # 'cosine_sine', 'sine_cosine', 'cross_cosine', 'sine_sine'

    # -------------------------------------------------------------------------
    # Death rule (None = twice the lattice dimension on that axis)
    # -------------------------------------------------------------------------
    'x_limit': None,
    'y_limit': None,

    # -------------------------------------------------------------------------
    # Output and reporting
    # -------------------------------------------------------------------------
    'output': './data/simulation_data.txt',
    'show_progress': True,
    'progress_style': 'auto',       # 'auto', 'tqdm', 'simple', 'none'
}

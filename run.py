#!/usr/bin/env python3
"""
fieldtrace Runner - Simple entrypoint for a lattice simulation.

Usage:
    python run.py                         # Run with default config
    python run.py --config myconfig.py    # Run with custom config
    python run.py --steps 200 --output data/short_run.txt
"""

import sys

from fieldtrace.__main__ import main

if __name__ == "__main__":
    sys.exit(main())

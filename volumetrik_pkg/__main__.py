"""Main entry point for running volumetrik_pkg as a module.

This allows running Volumetrik with:
    python -m volumetrik_pkg --preset washer
    python -m volumetrik_pkg --health-check
    python -m volumetrik_pkg -c "y = x^2" -c "y = 4" --x-min -2 --x-max 2

This is equivalent to running:
    python -m volumetrik_pkg.cli
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())

"""Main entry point for running rootfinder_pkg as a module.

This allows running rootfinder with:
    python -m rootfinder_pkg "x^2 = 4"
    python -m rootfinder_pkg --version

This is equivalent to running the ``rootfinder`` console script.
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())

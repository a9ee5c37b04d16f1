"""Centralized configuration for rootfinder.

This module defines:
- Solver switches (numeric fallback)
- Zero tolerances and rational reconstruction limits
- Numeric root finding budgets
- Input validation limits for the text front end
- SymPy names and transformations accepted by the parser

Every constant can be overridden via an environment variable prefixed with
ROOTFINDER_. Solver code never reads these constants directly: it receives a
SolverSettings value, whose defaults come from here.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

try:
    import importlib.metadata

    VERSION = importlib.metadata.version("rootfinder")
except Exception:
    # Fallback if package not installed
    VERSION = "0.1.0"

# Solver configuration
NUMERIC_FALLBACK_ENABLED = (
    os.getenv("ROOTFINDER_NUMERIC_FALLBACK_ENABLED", "true").lower() == "true"
)
OUTPUT_PRECISION = int(os.getenv("ROOTFINDER_OUTPUT_PRECISION", "6"))
MAX_ALTERNATE_FORMS = int(
    os.getenv("ROOTFINDER_MAX_ALTERNATE_FORMS", "4")
)  # rearrangements tried by substitution solving

# Exactness and reconstruction
ZERO_TOLERANCE = float(os.getenv("ROOTFINDER_ZERO_TOLERANCE", "1e-6"))
FLOAT_TO_RATIONAL_ITERATIONS = int(
    os.getenv("ROOTFINDER_FLOAT_TO_RATIONAL_ITERATIONS", "15")
)
DOWNCAST_ZERO_TOLERANCE = float(
    os.getenv("ROOTFINDER_DOWNCAST_ZERO_TOLERANCE", "1e-7")
)  # tightened zero range while reconciling roots
DOWNCAST_RATIONAL_ITERATIONS = int(
    os.getenv("ROOTFINDER_DOWNCAST_RATIONAL_ITERATIONS", "20")
)
RESIDUAL_TOLERANCE = float(
    os.getenv("ROOTFINDER_RESIDUAL_TOLERANCE", "1e-10")
)  # residual an exact candidate must reach before it replaces a root
EVALUATION_PRECISION = int(
    os.getenv("ROOTFINDER_EVALUATION_PRECISION", "30")
)  # significant digits for numeric evaluation

# Numeric solver configuration
MAX_NSOLVE_GUESSES = int(os.getenv("ROOTFINDER_MAX_NSOLVE_GUESSES", "50"))
MAX_NSOLVE_STEPS = int(os.getenv("ROOTFINDER_MAX_NSOLVE_STEPS", "80"))
ROOT_SEARCH_TOLERANCE = float(
    os.getenv("ROOTFINDER_ROOT_SEARCH_TOLERANCE", "1e-12")
)  # For root finding precision
ROOT_DEDUP_TOLERANCE = float(
    os.getenv("ROOTFINDER_ROOT_DEDUP_TOLERANCE", "1e-6")
)  # For deduplicating roots
NUMERIC_TOLERANCE = float(
    os.getenv("ROOTFINDER_NUMERIC_TOLERANCE", "1e-8")
)  # For imaginary part filtering
COARSE_GRID_MIN_SIZE = int(
    os.getenv("ROOTFINDER_COARSE_GRID_MIN_SIZE", "12")
)  # Minimum grid size for root search
NUMERIC_SEARCH_RADIUS = float(
    os.getenv("ROOTFINDER_NUMERIC_SEARCH_RADIUS", str(float(4 * sp.pi)))
)

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("ROOTFINDER_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("ROOTFINDER_MAX_EXPRESSION_DEPTH", "100")
)  # tree depth
MAX_EXPRESSION_NODES = int(
    os.getenv("ROOTFINDER_MAX_EXPRESSION_NODES", "5000")
)  # total nodes


@dataclass(frozen=True)
class SolverSettings:
    """Solver configuration threaded through every component.

    Instances are immutable; use override() to obtain a temporarily
    adjusted copy for the duration of one call.
    """

    numeric_fallback: bool = NUMERIC_FALLBACK_ENABLED
    zero_tolerance: float = ZERO_TOLERANCE
    float_to_rational_iterations: int = FLOAT_TO_RATIONAL_ITERATIONS
    residual_tolerance: float = RESIDUAL_TOLERANCE
    precision: int = EVALUATION_PRECISION
    max_alternate_forms: int = MAX_ALTERNATE_FORMS
    max_nsolve_guesses: int = MAX_NSOLVE_GUESSES
    max_nsolve_steps: int = MAX_NSOLVE_STEPS
    root_search_tolerance: float = ROOT_SEARCH_TOLERANCE
    root_dedup_tolerance: float = ROOT_DEDUP_TOLERANCE
    numeric_tolerance: float = NUMERIC_TOLERANCE
    coarse_grid_min_size: int = COARSE_GRID_MIN_SIZE
    search_radius: float = NUMERIC_SEARCH_RADIUS

    def override(self, **changes) -> "SolverSettings":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_SETTINGS = SolverSettings()

ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "E": sp.E,
    "e": sp.E,
    "I": sp.I,
    "i": sp.I,
    "sqrt": sp.sqrt,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "cot": sp.cot,
    "cotan": sp.cot,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "acot": sp.acot,
    "arcsin": sp.asin,
    "arccos": sp.acos,
    "arctan": sp.atan,
    "arccotan": sp.acot,
    "log": sp.log,
    "ln": sp.log,
    "exp": sp.exp,
    "factorial": sp.factorial,
    "sign": sp.sign,
    "signum": sp.sign,
}

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

VAR_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

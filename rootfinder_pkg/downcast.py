"""Root reconciliation: replacing float roots with exact rationals.

A root that evaluates to a number is rebuilt from the continued-fraction
convergents of its real and imaginary parts under a tightened tolerance. The
rational candidate only replaces the root if it satisfies the equation.
"""

from __future__ import annotations

from itertools import islice
from typing import Optional

import sympy as sp

from .config import (
    DEFAULT_SETTINGS,
    DOWNCAST_RATIONAL_ITERATIONS,
    DOWNCAST_ZERO_TOLERANCE,
    SolverSettings,
)
from .expressions import Expr, Number
from .logging_config import get_logger
from .sympy_bridge import evaluate, simplify

logger = get_logger("downcast")


def float_to_rational(
    value: sp.Expr, iterations: int, tolerance: float
) -> Optional[sp.Rational]:
    """Return the first continued-fraction convergent within ``tolerance``.

    Args:
        value: Real SymPy number (usually a Float)
        iterations: Maximum number of convergents to try
        tolerance: Absolute distance accepted

    Returns:
        The rational, or None when no convergent is close enough
    """
    exact = sp.Rational(value)
    convergents = sp.continued_fraction_convergents(sp.continued_fraction_iterator(exact))
    for convergent in islice(convergents, iterations):
        if abs(convergent - exact) < tolerance:
            return sp.Rational(convergent)
    return None


def downcast(
    equation: Expr, x: Expr, root: Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> Expr:
    """Replace a numerically evaluable root by an exact rational when possible.

    Symbolic roots (those that do not evaluate to a number) are returned
    unchanged. Otherwise the root is returned structurally simplified unless
    an exact rational (or complex rational) candidate makes the equation vanish.
    """
    value = evaluate(root, settings.precision)
    if value is None:
        return root
    tight = settings.override(
        float_to_rational_iterations=DOWNCAST_RATIONAL_ITERATIONS,
        zero_tolerance=DOWNCAST_ZERO_TOLERANCE,
    )
    real, imag = value.as_real_imag()
    real_part = float_to_rational(real, tight.float_to_rational_iterations, tight.zero_tolerance)
    imag_part = float_to_rational(imag, tight.float_to_rational_iterations, tight.zero_tolerance)
    if real_part is None or imag_part is None:
        return simplify(root)
    candidate = Number(real_part + imag_part * sp.I)
    error = evaluate(equation.substitute(x, candidate), tight.precision)
    if error is None:
        return root
    if abs(error) < tight.residual_tolerance:
        if candidate != root:
            logger.debug("Downcast %s to %s", root, candidate)
        return candidate
    return simplify(root)

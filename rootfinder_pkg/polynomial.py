"""Closed-form roots of equations that are polynomial in the variable."""

from __future__ import annotations

from typing import List, Optional

import sympy as sp

from .config import DEFAULT_SETTINGS, SolverSettings
from .expressions import Expr, Variable
from .logging_config import get_logger
from .sympy_bridge import from_sympy, to_sympy
from .types import ConversionError

logger = get_logger("polynomial")


def as_polynomial(expr: Expr, x: Expr) -> Optional[sp.Poly]:
    """Return ``expr`` as a SymPy Poly in ``x``, or None if it is not one."""
    if not isinstance(x, Variable):
        return None
    try:
        poly = sp.Poly(to_sympy(expr), sp.Symbol(x.name))
    except ConversionError:
        return None
    except sp.polys.polyerrors.PolynomialError:
        # Expression is not a polynomial (e.g., contains trig functions, exponentials, etc.)
        return None
    except (sp.polys.polyerrors.BasePolynomialError, ValueError, TypeError):
        return None
    if poly.degree() < 1:
        return None
    return poly


def solve_as_polynomial(
    expr: Expr, x: Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> Optional[List[Expr]]:
    """Solve ``expr = 0`` exactly when it is a polynomial in ``x``.

    Args:
        expr: Expression to find roots of (set to zero)
        x: Variable to solve for
        settings: Solver settings

    Returns:
        Distinct roots, or None when ``expr`` is not a polynomial in ``x`` or
        SymPy cannot find every root in closed form
    """
    poly = as_polynomial(expr, x)
    if poly is None:
        return None
    try:
        roots = sp.roots(poly, cubics=True, quartics=True)
    except (NotImplementedError, ValueError, TypeError):
        logger.debug("sympy.roots failed on %s", poly, exc_info=True)
        return None
    if sum(roots.values()) != poly.degree():
        logger.debug("Only %d of %d roots of %s in closed form", sum(roots.values()), poly.degree(), poly)
        return None
    try:
        return [from_sympy(root) for root in roots]
    except ConversionError:
        logger.debug("Polynomial roots of %s have no node form", poly, exc_info=True)
        return None

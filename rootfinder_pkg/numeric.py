"""Numeric root finding, used when no symbolic strategy succeeds.

Strategies, in order:
1. Polynomial in the variable: all complex roots via Poly.nroots
2. Otherwise: Newton-type iteration (mpmath.findroot) from every sign change
   on a real sample grid and from a fixed set of complex key points

Roots are deduplicated by tolerance and only kept if the residual vanishes.
"""

from __future__ import annotations

from typing import List

import mpmath
import numpy as np
import sympy as sp

from .config import DEFAULT_SETTINGS, SolverSettings
from .expressions import Expr, Number, Variable
from .logging_config import get_logger
from .polynomial import as_polynomial
from .solution_set import SolutionSet
from .sympy_bridge import to_sympy
from .types import ConversionError

logger = get_logger("numeric")

# Starting points off the real axis, so complex roots are reachable too
KEY_POINTS = (
    complex(0, 1),
    complex(1, 0),
    complex(-3, -3),
    complex(2, 2),
    complex(13, 13),
    complex(-9, 7),
    complex(0.5, -0.5),
    complex(-0.5, 0.5),
)


def _to_number(root: complex, settings: SolverSettings) -> Number:
    real = sp.Float(root.real, settings.precision)
    if abs(root.imag) < settings.numeric_tolerance:
        return Number(real)
    return Number(real + sp.Float(root.imag, settings.precision) * sp.I)


def _add_root(roots: List[complex], root: complex, settings: SolverSettings) -> None:
    if not any(abs(existing - root) < settings.root_dedup_tolerance for existing in roots):
        roots.append(root)


def _polynomial_roots(poly: sp.Poly, settings: SolverSettings) -> List[complex]:
    roots: List[complex] = []
    try:
        for root in poly.nroots(n=settings.precision, maxsteps=settings.max_nsolve_steps):
            _add_root(roots, complex(root), settings)
    except (sp.polys.polyerrors.PolynomialError, mpmath.libmp.NoConvergence):
        logger.debug("nroots did not converge for %s", poly, exc_info=True)
    except (ValueError, TypeError):
        logger.debug("nroots failed for %s", poly, exc_info=True)
    return roots


def _sign_change_guesses(fn, settings: SolverSettings) -> List[float]:
    coarse_grid_size = max(settings.coarse_grid_min_size, settings.max_nsolve_guesses // 3)
    sample_points = np.linspace(-settings.search_radius, settings.search_radius, coarse_grid_size + 1)
    candidate_points = []
    previous_value = None
    for sample_point in sample_points:
        try:
            current = complex(fn(mpmath.mpf(float(sample_point))))
        except (ValueError, TypeError, ZeroDivisionError, OverflowError):
            previous_value = None
            continue
        if abs(current.imag) > settings.numeric_tolerance or current.real != current.real:
            previous_value = None
            continue
        if previous_value is not None and previous_value * current.real <= 0:
            candidate_points.append(float(sample_point))
        previous_value = current.real
    return candidate_points[: settings.max_nsolve_guesses]


def _iterative_roots(target: sp.Expr, symbol: sp.Symbol, settings: SolverSettings) -> List[complex]:
    fn = sp.lambdify(symbol, target, modules="mpmath")
    guesses = [complex(g) for g in _sign_change_guesses(fn, settings)]
    guesses.extend(KEY_POINTS)
    roots: List[complex] = []
    with mpmath.workdps(settings.precision):
        for guess in guesses[: settings.max_nsolve_guesses]:
            try:
                start = mpmath.mpf(guess.real) if guess.imag == 0 else mpmath.mpc(guess)
                root = mpmath.findroot(
                    fn, start, tol=settings.root_search_tolerance, maxsteps=settings.max_nsolve_steps
                )
                residual = abs(fn(root))
            except (ValueError, TypeError, ZeroDivisionError, OverflowError):
                continue
            if residual > settings.numeric_tolerance:
                continue
            _add_root(roots, complex(root), settings)
    return roots


def solve_numerically(
    expr: Expr, x: Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> SolutionSet:
    """Find roots of ``expr = 0`` numerically.

    Args:
        expr: Expression to find roots of (set to zero); ``x`` must be its
            only free variable
        x: Variable to solve for
        settings: Precision and iteration budget

    Returns:
        Finite set of Number roots; possibly empty or partial
    """
    if not isinstance(x, Variable):
        return SolutionSet.empty()
    symbol = sp.Symbol(x.name)
    try:
        target = to_sympy(expr)
    except ConversionError:
        return SolutionSet.empty()
    if target.free_symbols != {symbol}:
        return SolutionSet.empty()

    poly = as_polynomial(expr, x)
    if poly is not None:
        roots = _polynomial_roots(poly, settings)
    else:
        roots = _iterative_roots(target, symbol, settings)
    logger.debug("Numeric search found %d root(s) of %s", len(roots), target)
    return SolutionSet(_to_number(root, settings) for root in roots)

"""Solvers for rational functions and rational powers of the variable.

Both take the recursive solver as a parameter, since they reduce the
equation to simpler ones it can handle.
"""

from __future__ import annotations

from functools import reduce
from math import lcm
from typing import Callable, Optional

import sympy as sp

from .config import DEFAULT_SETTINGS, SolverSettings
from .expressions import Expr, Variable
from .logging_config import get_logger
from .solution_set import SolutionSet
from .sympy_bridge import evaluate, from_sympy, to_sympy
from .types import ConversionError

logger = get_logger("rational_solvers")

Solve = Callable[..., SolutionSet]


def _vanishes(expr: Expr, settings: SolverSettings) -> bool:
    value = evaluate(expr, settings.precision)
    return value is not None and abs(value) < settings.zero_tolerance


def solve_common_denominator(
    expr: Expr, x: Expr, solve: Solve, settings: SolverSettings = DEFAULT_SETTINGS
) -> Optional[SolutionSet]:
    """Solve ``p(x)/q(x) = 0`` after bringing ``expr`` over one denominator.

    Roots of the numerator that are also roots of the denominator are
    excluded.

    Returns:
        The roots, or None when no denominator depends on ``x``
    """
    if not isinstance(x, Variable):
        return None
    symbol = sp.Symbol(x.name)
    try:
        numerator, denominator = sp.fraction(sp.together(to_sympy(expr)))
        if not denominator.has(symbol):
            return None
        top = from_sympy(numerator)
        bottom = from_sympy(denominator)
    except ConversionError:
        return None
    except (sp.polys.polyerrors.BasePolynomialError, ValueError, TypeError):
        logger.debug("Could not bring %s over a common denominator", expr, exc_info=True)
        return None
    if not top.contains(x):
        return SolutionSet.empty()
    roots = solve(top, x, settings, compensating=False) - solve(bottom, x, settings, compensating=False)
    if not roots.is_finite:
        return roots
    return SolutionSet(r for r in roots if not _vanishes(bottom.substitute(x, r), settings))


def solve_fractioned_polynomial(
    expr: Expr, x: Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> Optional[SolutionSet]:
    """Solve equations polynomial in rational powers ``x^(p/q)``.

    With ``L`` the least common multiple of the ``q``, the substitution
    ``x = t^L`` yields a polynomial in ``t``. Candidates ``t0^L`` that do not
    satisfy the original equation on the principal branch are dropped.

    Returns:
        The roots, or None when ``expr`` has no such shape
    """
    if not isinstance(x, Variable):
        return None
    symbol = sp.Symbol(x.name)
    try:
        target = to_sympy(expr)
    except ConversionError:
        return None
    powers = [p for p in target.atoms(sp.Pow) if p.base == symbol]
    if not powers or not all(p.exp.is_Rational for p in powers):
        return None
    denominators = [int(p.exp.q) for p in powers if p.exp.q > 1]
    if not denominators:
        return None
    order = reduce(lcm, denominators, 1)

    t = sp.Dummy("t", positive=True)
    substituted = target.xreplace({p: t ** int(p.exp * order) for p in powers})
    substituted = substituted.xreplace({symbol: t**order})
    try:
        numerator, _ = sp.fraction(sp.together(substituted))
        poly = sp.Poly(numerator, t)
        if poly.degree() < 1:
            return None
        roots = sp.roots(poly, cubics=True, quartics=True)
    except (sp.polys.polyerrors.BasePolynomialError, NotImplementedError, ValueError, TypeError):
        logger.debug("Fractioned polynomial solver failed on %s", expr, exc_info=True)
        return None
    if sum(roots.values()) != poly.degree():
        return None

    solutions = []
    for root in roots:
        try:
            candidate = from_sympy(sp.expand(root**order))
        except ConversionError:
            return None
        residual = evaluate(expr.substitute(x, candidate), settings.precision)
        if residual is not None and abs(residual) > settings.zero_tolerance:
            continue
        solutions.append(candidate)
    return SolutionSet(solutions)

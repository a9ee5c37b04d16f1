"""Solvers for equations linear in trigonometric or exponential terms.

Both rewrite the equation so that every occurrence of the variable sits in
an exponential ``exp(c_i*x + b_i)``. When all the ``c_i`` are rational
multiples of a common step ``s``, the substitution ``t = exp(s*x)`` turns the
equation into a (Laurent) polynomial in ``t``. Every root ``t0`` then gives the
family ``x = (log(t0) + 2*pi*i*n) / s``.

    sin(x) + cos(x) = 1  ->  (1 - i)t^2 - 2t + (1 + i) = 0  ->  t in {1, i}
                         ->  x in {2 pi n, pi/2 + 2 pi n}
"""

from __future__ import annotations

from math import lcm
from typing import Optional

import sympy as sp

from .config import DEFAULT_SETTINGS, SolverSettings
from .expressions import Expr, Variable, fresh_variable
from .logging_config import get_logger
from .solution_set import SolutionSet
from .sympy_bridge import from_sympy, to_sympy
from .types import ConversionError

logger = get_logger("linear_solvers")

_TRIGONOMETRIC = (sp.sin, sp.cos, sp.tan, sp.cot)


def _has_trigonometry(target: sp.Expr, symbol: sp.Symbol) -> bool:
    return any(f.has(symbol) for f in target.atoms(*_TRIGONOMETRIC))


def _powers_to_exp(target: sp.Expr, symbol: sp.Symbol) -> sp.Expr:
    # a^f(x) with constant a  ->  exp(f(x) * log(a)), kept unevaluated
    return target.replace(
        lambda e: e.is_Pow and not e.base.has(symbol) and e.exp.has(symbol),
        lambda e: sp.exp(e.exp * sp.log(e.base), evaluate=False),
    )


def _solve_in_exponentials(
    expr: Expr, rewritten: sp.Expr, x: Variable
) -> Optional[SolutionSet]:
    symbol = sp.Symbol(x.name)
    atoms = sorted(
        (a for a in rewritten.atoms(sp.exp) if a.has(symbol)), key=sp.default_sort_key
    )
    if not atoms:
        return None

    # exponent of each atom: coefficient * x + offset
    coefficients = []
    for atom in atoms:
        coefficient = sp.diff(atom.args[0], symbol)
        if coefficient.has(symbol) or coefficient == 0:
            return None
        coefficients.append(coefficient)

    unit = coefficients[0]
    ratios = [sp.simplify(sp.expand_log(c / unit, force=True)) for c in coefficients]
    if not all(r.is_Rational for r in ratios):
        return None
    denominator = lcm(*(int(r.q) for r in ratios))
    step = unit / denominator

    t = sp.Dummy("t")
    replacements = {}
    for atom, coefficient, ratio in zip(atoms, coefficients, ratios):
        offset = sp.expand(atom.args[0] - coefficient * symbol)
        replacements[atom] = sp.exp(offset) * t ** int(ratio * denominator)
    substituted = rewritten.xreplace(replacements)
    if substituted.has(symbol):
        return None

    numerator, remainder = sp.fraction(sp.together(substituted))
    try:
        poly = sp.Poly(numerator, t)
    except sp.polys.polyerrors.PolynomialError:
        return None
    if poly.degree() < 1:
        return None
    roots = sp.roots(poly, cubics=True, quartics=True)
    if sum(roots.values()) != poly.degree():
        return None

    n = sp.Symbol(fresh_variable((expr,), "n").name)
    solutions = []
    for root in roots:
        if root.is_zero or sp.simplify(remainder.subs(t, root)) == 0:
            continue
        solutions.append(sp.expand((sp.log(root) + 2 * sp.pi * sp.I * n) / step))
    try:
        return SolutionSet(from_sympy(s) for s in solutions)
    except ConversionError:
        logger.debug("Exponential roots of %s have no node form", expr, exc_info=True)
        return None


def solve_trigonometric_linear(
    expr: Expr, x: Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> Optional[SolutionSet]:
    """Solve equations linear in sin/cos/tan/cot of commensurable arguments.

    Returns:
        The solution families, or None if the equation does not have that shape
    """
    if not isinstance(x, Variable):
        return None
    symbol = sp.Symbol(x.name)
    try:
        target = to_sympy(expr)
        if not _has_trigonometry(target, symbol):
            return None
        return _solve_in_exponentials(expr, target.rewrite(sp.exp), x)
    except ConversionError:
        return None
    except (sp.polys.polyerrors.BasePolynomialError, NotImplementedError, ValueError, TypeError):
        logger.debug("Trigonometric solver failed on %s", expr, exc_info=True)
        return None


def solve_exponential_linear(
    expr: Expr, x: Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> Optional[SolutionSet]:
    """Solve equations linear in exponentials ``a^(c*x + b)`` of commensurable rates.

    Returns:
        The solution families, or None if the equation does not have that shape
    """
    if not isinstance(x, Variable):
        return None
    symbol = sp.Symbol(x.name)
    try:
        target = to_sympy(expr)
        if _has_trigonometry(target, symbol):
            return None
        return _solve_in_exponentials(expr, _powers_to_exp(target, symbol), x)
    except ConversionError:
        return None
    except (sp.polys.polyerrors.BasePolynomialError, NotImplementedError, ValueError, TypeError):
        logger.debug("Exponential solver failed on %s", expr, exc_info=True)
        return None

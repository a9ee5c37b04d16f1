"""Analytical equation solving.

solve(expr, x) finds the roots of ``expr = 0``. Strategies are tried in a
fixed order and the first one that produces an answer wins:

1. ``x = 0`` itself
2. Closed-form polynomial roots
3. Structural shortcuts on the top-level node (products, quotients, powers,
   "paying back" a difference, direct inversion of a function)
4. Change of variable: the smallest subtree covering every occurrence of
   ``x`` is replaced by a fresh variable, e.g.
   ``sin(x)^2 + sin(x) - 2 = 0  ->  t^2 + t - 2 = 0, sin(x) = t``
5. Pattern solvers: linear in trigonometric functions, linear in
   exponentials, common denominator, rational powers
6. Numeric root finding (optional)

Recursive calls made to pay back a reformulation run with
``compensating=True``; they skip the change of variable so the recursion
cannot revisit the same rewriting.

Every root that evaluates to a number goes through downcast(), which
restores exact rationals hidden behind floating point noise.
"""

from __future__ import annotations

from typing import Callable, Optional

from .config import DEFAULT_SETTINGS, SolverSettings
from .downcast import downcast
from .expressions import ZERO, Difference, Expr, Function, Power, Product, Quotient, Variable, fresh_variable
from .inversion import invert
from .linear_solvers import solve_exponential_linear, solve_trigonometric_linear
from .logging_config import get_logger
from .numeric import solve_numerically
from .polynomial import solve_as_polynomial
from .rational_solvers import solve_common_denominator, solve_fractioned_polynomial
from .solution_set import SolutionSet, unite
from .sympy_bridge import simplify
from .tree_analysis import alternate_forms, minimal_subtree
from .types import ContractViolationError

logger = get_logger("solver")

PatternSolver = Callable[[Expr, Expr, SolverSettings], Optional[SolutionSet]]


def _reconcile(expr: Expr, x: Expr, roots: SolutionSet, settings: SolverSettings) -> SolutionSet:
    return roots.map(lambda root: downcast(expr, x, root, settings))


def _solve_part(part: Expr, x: Expr, settings: SolverSettings) -> SolutionSet:
    # a factor without x never vanishes as a function of x
    if not part.contains(x):
        return SolutionSet.empty()
    return solve(part, x, settings)


def _solve_shortcut(
    expr: Expr, x: Expr, settings: SolverSettings, compensating: bool
) -> Optional[SolutionSet]:
    if isinstance(expr, Product):
        return _solve_part(expr.multiplier, x, settings) | _solve_part(expr.multiplicand, x, settings)
    if isinstance(expr, Quotient):
        return _solve_part(expr.dividend, x, settings) - _solve_part(expr.divisor, x, settings)
    if isinstance(expr, Power):
        return _solve_part(expr.base, x, settings)
    if isinstance(expr, Difference) and compensating and not expr.minuend.contains(x):
        return _pay_back(expr.subtrahend, expr.minuend, x, settings)
    if isinstance(expr, Function):
        candidates = invert(expr, ZERO, x, settings)
        if any(candidate.contains(x) for candidate in candidates):
            # x occurs more than once below the function; inversion cannot isolate
            # it, so substitution takes over instead of returning these non-roots
            return None
        return SolutionSet(downcast(expr, x, candidate, settings) for candidate in candidates)
    return None


def _pay_back(subtrahend: Expr, value: Expr, x: Expr, settings: SolverSettings) -> Optional[SolutionSet]:
    """Solve ``subtrahend = value`` by peeling one layer off ``subtrahend``."""
    if subtrahend == x:
        return SolutionSet.singleton(value)
    children = [child for child in subtrahend.direct_children() if child.contains(x)]
    if len(children) != 1:
        return None
    child = children[0]
    return unite(
        solve(child - candidate, x, settings, compensating=True)
        for candidate in invert(subtrahend, value, child, settings)
    )


def _solve_by_substitution(expr: Expr, x: Expr, settings: SolverSettings) -> Optional[SolutionSet]:
    variable = fresh_variable((expr,), "t")
    for form in alternate_forms(expr, settings.max_alternate_forms):
        if not form.contains(x):
            # an identity or a contradiction; neither has finitely many roots
            logger.debug("%s does not depend on %s once rearranged", expr, x)
            return SolutionSet.empty()
        subtree = minimal_subtree(form, x)
        if subtree == x:
            continue
        replaced = form.substitute(subtree, variable)
        if replaced.contains(x):
            continue
        inner = solve(replaced, variable, settings)
        if not inner.is_finite:
            continue
        result = unite(solve(subtree - root, x, settings, compensating=True) for root in inner)
        # unlike a plain finite union, an empty one is not final: the remaining
        # forms and the pattern solvers still get a chance
        if result.is_finite and not result.is_empty:
            logger.debug("Solved %s through %s = %s", expr, variable, subtree)
            return _reconcile(expr, x, result, settings)
    return None


def _pattern_solvers() -> tuple[tuple[str, PatternSolver], ...]:
    return (
        ("trigonometric", solve_trigonometric_linear),
        ("exponential", solve_exponential_linear),
        ("common denominator", lambda e, x, s: solve_common_denominator(e, x, solve, s)),
        ("fractioned polynomial", solve_fractioned_polynomial),
    )


def solve(
    expr: Expr,
    x: Expr,
    settings: SolverSettings = DEFAULT_SETTINGS,
    compensating: bool = False,
) -> SolutionSet:
    """Solve ``expr = 0`` for ``x``.

    Args:
        expr: Expression set to zero; must contain ``x``
        x: Variable to solve for
        settings: Tolerances, precision and whether numeric fallback is allowed
        compensating: True for recursive calls paying back a reformulation

    Returns:
        The roots found. Empty means no roots exist or none could be found.

    Raises:
        ContractViolationError: if ``expr`` does not contain ``x``
    """
    if not expr.contains(x):
        raise ContractViolationError(f"{expr} does not contain {x}")
    if expr == x:
        return SolutionSet.singleton(ZERO)

    roots = solve_as_polynomial(expr, x, settings)
    if roots is not None:
        logger.debug("Solved %s as a polynomial in %s", expr, x)
        return SolutionSet(downcast(expr, x, simplify(root), settings) for root in roots)

    result = _solve_shortcut(expr, x, settings, compensating)
    if result is not None:
        return result

    if not compensating:
        result = _solve_by_substitution(expr, x, settings)
        if result is not None:
            return result

    for name, pattern_solver in _pattern_solvers():
        result = pattern_solver(expr, x, settings)
        if result is not None and result.is_finite:
            logger.debug("Solved %s with the %s solver", expr, name)
            return _reconcile(expr, x, result, settings)

    if settings.numeric_fallback and len(expr.variables()) == 1:
        logger.debug("Falling back to numeric root finding for %s", expr)
        return _reconcile(expr, x, solve_numerically(expr, x, settings), settings)

    logger.debug("No strategy solved %s for %s", expr, x)
    return SolutionSet.empty()


def solve_equation(
    expr: Expr, x: Expr, settings: Optional[SolverSettings] = None
) -> SolutionSet:
    """Public entry point: roots of ``expr = 0`` in ``x``.

    Raises:
        ContractViolationError: if ``x`` is not a variable or does not occur in ``expr``
    """
    if not isinstance(x, Variable):
        raise ContractViolationError(f"Can only solve for a variable, got {x}")
    return solve(expr, x, settings or DEFAULT_SETTINGS)

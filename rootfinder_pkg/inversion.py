"""Inversion rules: rewriting ``node = value`` into ``x = g(value)``.

One rule per node kind, registered in _RULES. invert() normalizes the target
value once, short-circuits when the node already is the target and drops
non-finite candidates (e.g. produced by a division by zero).

Examples:
    x^2 = a      =>  x in {sqrt(a), -sqrt(a)}
    sin(x) = a   =>  x in {asin(a) + 2 pi n, pi - asin(a) + 2 pi n}

Periodic families are written with a fresh integer parameter ``n_k``.
"""

from __future__ import annotations

from typing import Callable, Dict, List

import sympy as sp

from .config import DEFAULT_SETTINGS, SolverSettings
from .expressions import (
    IMAGINARY_UNIT,
    NODE_KINDS,
    PI,
    Arccos,
    Arccotan,
    Arcsin,
    Arctan,
    Cos,
    Cotan,
    Derivative,
    Difference,
    Expr,
    Factorial,
    Integral,
    Limit,
    Log,
    Number,
    Power,
    Product,
    Quotient,
    Signum,
    Sin,
    Sum,
    Tan,
    Tensor,
    Variable,
    fresh_variable,
    ln,
)
from .logging_config import get_logger
from .sympy_bridge import evaluate, from_sympy, is_finite, simplify
from .types import ContractViolationError

logger = get_logger("inversion")

Rule = Callable[[Expr, Expr, Expr, SolverSettings], List[Expr]]
_RULES: Dict[type, Rule] = {}


def _rule(*kinds: type):
    def register(fn: Rule) -> Rule:
        for kind in kinds:
            _RULES[kind] = fn
        return fn

    return register


def invert(
    node: Expr, value: Expr, x: Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> List[Expr]:
    """Return expressions equal to ``x`` given ``node = value``.

    Args:
        node: Expression containing ``x``
        value: Target value
        x: Subtree to isolate (usually a Variable)
        settings: Solver settings (tolerances used by range checks)

    Returns:
        Candidate expressions for ``x``; empty if no rule applies

    Raises:
        ContractViolationError: if ``node`` does not contain ``x``
    """
    if not node.contains(x):
        raise ContractViolationError(f"Cannot invert {node}: it does not contain {x}")
    simplified = simplify(value)
    if node == x:
        return [simplified]
    rule = _RULES[type(node)]
    return [candidate for candidate in rule(node, simplified, x, settings) if is_finite(candidate)]


def roots_of_unity(power: int) -> List[Expr]:
    """All ``|power|``-th roots of 1 as exact expressions."""
    count = abs(power)
    return [
        from_sympy(sp.expand_complex(sp.exp(2 * sp.pi * sp.I * k / count)))
        for k in range(count)
    ]


def in_bounds(
    value: Expr, low: sp.Expr, high: sp.Expr, settings: SolverSettings = DEFAULT_SETTINGS
) -> bool:
    """True if the real part of ``value`` lies within [low, high].

    Values that cannot be evaluated numerically are accepted; the imaginary
    part is unbounded.
    """
    evaluated = evaluate(value, settings.precision)
    if evaluated is None:
        return True
    real = float(sp.re(evaluated))
    tolerance = settings.zero_tolerance
    return float(low) - tolerance <= real <= float(high) + tolerance


@_rule(Number)
def _invert_number(node, value, x, settings):
    raise ContractViolationError(f"Number {node} cannot contain {x}")


@_rule(Variable, Tensor)
def _invert_leaf(node, value, x, settings):
    return [node]


@_rule(Sum)
def _invert_sum(node, value, x, settings):
    # x + a = value => x = value - a
    if node.augend.contains(x):
        return invert(node.augend, value - node.addend, x, settings)
    return invert(node.addend, value - node.augend, x, settings)


@_rule(Difference)
def _invert_difference(node, value, x, settings):
    if node.subtrahend.contains(x):
        # x - a = value => x = value + a
        return invert(node.subtrahend, value + node.minuend, x, settings)
    # a - x = value => x = a - value
    return invert(node.minuend, node.subtrahend - value, x, settings)


@_rule(Product)
def _invert_product(node, value, x, settings):
    # x * a = value => x = value / a
    if node.multiplier.contains(x):
        return invert(node.multiplier, value / node.multiplicand, x, settings)
    return invert(node.multiplicand, value / node.multiplier, x, settings)


@_rule(Quotient)
def _invert_quotient(node, value, x, settings):
    if node.dividend.contains(x):
        # x / a = value => x = a * value
        return invert(node.dividend, value * node.divisor, x, settings)
    # a / x = value => x = a / value
    return invert(node.divisor, node.dividend / value, x, settings)


@_rule(Power)
def _invert_power(node, value, x, settings):
    if node.base.contains(x):
        exponent = node.exponent
        if isinstance(exponent, Number) and exponent.is_integer:
            power = int(exponent.value)
            if power == 0:
                return []
            principal = value ** (1 / exponent)
            return [
                candidate
                for root in roots_of_unity(power)
                for candidate in invert(node.base, root * principal, x, settings)
            ]
        return invert(node.base, value ** (1 / exponent), x, settings)
    # a ^ x = value => x = (ln(value) + 2 pi i n) / ln(a)
    n = fresh_variable((node, value), "n")
    branch = ln(value) + 2 * IMAGINARY_UNIT * PI * n
    return invert(node.exponent, branch / ln(node.base), x, settings)


@_rule(Sin)
def _invert_sin(node, value, x, settings):
    n = fresh_variable((node, value), "n")
    # sin(x) = value => x = arcsin(value) + 2 pi n  or  pi - arcsin(value) + 2 pi n
    return [
        *invert(node.argument, Arcsin(value) + 2 * PI * n, x, settings),
        *invert(node.argument, PI - Arcsin(value) + 2 * PI * n, x, settings),
    ]


@_rule(Cos)
def _invert_cos(node, value, x, settings):
    n = fresh_variable((node, value), "n")
    return [
        *invert(node.argument, Arccos(value) + 2 * PI * n, x, settings),
        *invert(node.argument, -Arccos(value) + 2 * PI * n, x, settings),
    ]


@_rule(Tan)
def _invert_tan(node, value, x, settings):
    n = fresh_variable((node, value), "n")
    return invert(node.argument, Arctan(value) + PI * n, x, settings)


@_rule(Cotan)
def _invert_cotan(node, value, x, settings):
    n = fresh_variable((node, value), "n")
    return invert(node.argument, Arccotan(value) + PI * n, x, settings)


_HALF_PI = sp.pi / 2

_PRINCIPAL_RANGES = {
    Arcsin: (-_HALF_PI, _HALF_PI, Sin),
    Arccos: (sp.Integer(0), sp.pi, Cos),
    Arctan: (-_HALF_PI, _HALF_PI, Tan),
    Arccotan: (-_HALF_PI, _HALF_PI, Cotan),
}


@_rule(Arcsin, Arccos, Arctan, Arccotan)
def _invert_arc(node, value, x, settings):
    low, high, direct = _PRINCIPAL_RANGES[type(node)]
    if not in_bounds(value, low, high, settings):
        logger.debug("%s cannot equal %s", type(node).__name__, value)
        return []
    return invert(node.argument, direct(value), x, settings)


@_rule(Log)
def _invert_log(node, value, x, settings):
    if node.base.contains(x):
        # log_x(a) = value => x = a ^ (1 / value)
        return invert(node.base, node.antilogarithm ** (1 / value), x, settings)
    # log_a(x) = value => x = a ^ value
    return invert(node.antilogarithm, node.base**value, x, settings)


@_rule(Factorial, Limit)
def _invert_unsupported(node, value, x, settings):
    return []


@_rule(Derivative)
def _invert_derivative(node, value, x, settings):
    if not node.expression.contains(x):
        return []
    return invert(node.expression, Integral(value, node.var, node.order), x, settings)


@_rule(Integral)
def _invert_integral(node, value, x, settings):
    if not node.expression.contains(x):
        return []
    return invert(node.expression, Derivative(value, node.var, node.order), x, settings)


@_rule(Signum)
def _invert_signum(node, value, x, settings):
    # sign(f) = value => f = value * r for some positive r; exact only for |value| = 1
    r = fresh_variable((node.argument, value), "r")
    return invert(node.argument, value * r, x, settings)


_missing = [kind.__name__ for kind in NODE_KINDS if kind not in _RULES]
if _missing:
    raise ContractViolationError(f"No inversion rule for: {', '.join(_missing)}")

"""Conversion between expression trees and SymPy objects.

SymPy serves as the number tower and as the engine behind the specialized
solvers. Its n-ary Add/Mul are folded back into binary nodes:
- terms with a negative sign become Difference
- negative powers become Quotient
- exp(a) becomes Power(E, a)
"""

from __future__ import annotations

from functools import reduce
from typing import Optional

import sympy as sp

from .expressions import (
    E,
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
)
from .logging_config import get_logger
from .types import ConversionError

logger = get_logger("sympy_bridge")

_UNARY_TO_SYMPY = {
    Sin: sp.sin,
    Cos: sp.cos,
    Tan: sp.tan,
    Cotan: sp.cot,
    Arcsin: sp.asin,
    Arccos: sp.acos,
    Arctan: sp.atan,
    Arccotan: sp.acot,
    Factorial: sp.factorial,
    Signum: sp.sign,
}

_UNARY_FROM_SYMPY = {func: node for node, func in _UNARY_TO_SYMPY.items()}

# Functions without a node kind of their own, rewritten into supported ones
_REWRITES = {
    sp.sec: lambda arg: 1 / sp.cos(arg),
    sp.csc: lambda arg: 1 / sp.sin(arg),
    sp.asec: lambda arg: sp.acos(1 / arg),
    sp.acsc: lambda arg: sp.asin(1 / arg),
}


def to_sympy(expr: Expr) -> sp.Basic:
    """Build the SymPy counterpart of an expression tree (auto-evaluated)."""
    if isinstance(expr, Number):
        return expr.value
    if isinstance(expr, Variable):
        return sp.Symbol(expr.name)
    if isinstance(expr, Sum):
        return to_sympy(expr.augend) + to_sympy(expr.addend)
    if isinstance(expr, Difference):
        return to_sympy(expr.subtrahend) - to_sympy(expr.minuend)
    if isinstance(expr, Product):
        return to_sympy(expr.multiplier) * to_sympy(expr.multiplicand)
    if isinstance(expr, Quotient):
        return to_sympy(expr.dividend) / to_sympy(expr.divisor)
    if isinstance(expr, Power):
        if expr.base == E:
            return sp.exp(to_sympy(expr.exponent))
        return to_sympy(expr.base) ** to_sympy(expr.exponent)
    if isinstance(expr, Log):
        if expr.base == E:
            return sp.log(to_sympy(expr.antilogarithm))
        return sp.log(to_sympy(expr.antilogarithm), to_sympy(expr.base))
    if type(expr) in _UNARY_TO_SYMPY:
        return _UNARY_TO_SYMPY[type(expr)](to_sympy(expr.argument))
    if isinstance(expr, Derivative):
        return sp.Derivative(
            to_sympy(expr.expression), (sp.Symbol(expr.var.name), expr.order)
        )
    if isinstance(expr, Integral):
        var = sp.Symbol(expr.var.name)
        return sp.Integral(to_sympy(expr.expression), *([var] * expr.order))
    if isinstance(expr, Limit):
        return sp.Limit(
            to_sympy(expr.expression),
            sp.Symbol(expr.var.name),
            to_sympy(expr.destination),
        )
    if isinstance(expr, Tensor):
        rows, cols = expr.shape
        return sp.ImmutableMatrix(rows, cols, [to_sympy(e) for e in expr.elements])
    raise ConversionError(f"No SymPy counterpart for {type(expr).__name__}")


def _from_add(expr: sp.Add) -> Expr:
    terms = expr.as_ordered_terms()
    result = from_sympy(terms[0])
    for term in terms[1:]:
        if term.could_extract_minus_sign():
            result = Difference(result, from_sympy(-term))
        else:
            result = Sum(result, from_sympy(term))
    return result


def _from_mul(expr: sp.Mul) -> Expr:
    numerator, denominator = expr.as_numer_denom()
    if denominator != 1:
        return Quotient(from_sympy(numerator), from_sympy(denominator))
    factors = expr.as_ordered_factors()
    return reduce(Product, (from_sympy(f) for f in factors))


def _from_pow(expr: sp.Pow) -> Expr:
    base, exponent = expr.as_base_exp()
    if exponent.is_number and exponent.could_extract_minus_sign():
        return Quotient(Number(1), from_sympy(base ** (-exponent)))
    if base == sp.E:
        return Power(E, from_sympy(exponent))
    return Power(from_sympy(base), from_sympy(exponent))


def _from_calculus(expr: sp.Basic) -> Expr:
    if isinstance(expr, sp.Derivative):
        result = from_sympy(expr.expr)
        for var, order in expr.variable_count:
            result = Derivative(result, Variable(var.name), int(order))
        return result
    if isinstance(expr, sp.Integral):
        result = from_sympy(expr.function)
        variables = []
        for limit in expr.limits:
            if len(limit) != 1:
                raise ConversionError("Definite integrals are not supported")
            variables.append(limit[0])
        # consecutive integrations over the same variable collapse into one node
        index = 0
        while index < len(variables):
            var = variables[index]
            order = 1
            while index + order < len(variables) and variables[index + order] == var:
                order += 1
            result = Integral(result, Variable(var.name), order)
            index += order
        return result
    var = expr.args[1]
    return Limit(from_sympy(expr.args[0]), Variable(var.name), from_sympy(expr.args[2]))


def from_sympy(expr: sp.Basic) -> Expr:
    """Convert a SymPy object into an expression tree.

    Raises:
        ConversionError: if the object has no supported counterpart
    """
    if isinstance(expr, sp.MatrixBase):
        rows, cols = expr.shape
        return Tensor(tuple(from_sympy(e) for e in expr), (rows, cols))
    expr = sp.sympify(expr)
    if isinstance(expr, sp.Symbol):
        return Variable(expr.name)
    if expr.is_Atom and expr.is_number:
        return Number(expr)
    if isinstance(expr, sp.Add):
        if not expr.free_symbols and _is_complex_literal(expr):
            return Number(expr)
        return _from_add(expr)
    if isinstance(expr, sp.Mul):
        if not expr.free_symbols and _is_complex_literal(expr):
            return Number(expr)
        return _from_mul(expr)
    if isinstance(expr, sp.Pow):
        return _from_pow(expr)
    if isinstance(expr, sp.exp):
        return Power(E, from_sympy(expr.args[0]))
    if isinstance(expr, sp.log):
        return Log(E, from_sympy(expr.args[0]))
    if expr.func in _UNARY_FROM_SYMPY:
        return _UNARY_FROM_SYMPY[expr.func](from_sympy(expr.args[0]))
    if isinstance(expr, (sp.Derivative, sp.Integral, sp.Limit)):
        return _from_calculus(expr)
    if expr.func in _REWRITES:
        return from_sympy(_REWRITES[expr.func](expr.args[0]))
    if isinstance(expr, sp.Function):
        rewritten = expr.rewrite(sp.exp)
        if rewritten != expr:
            return from_sympy(rewritten)
    raise ConversionError(f"Unsupported expression kind: {expr.func}")


def _is_complex_literal(expr: sp.Basic) -> bool:
    """True for a + b*I with rational or float a and b."""
    real, imag = expr.as_real_imag()
    return bool(real.is_Number and imag.is_Number)


def simplify(expr: Expr) -> Expr:
    """Cheap structural normalization through SymPy auto-evaluation.

    Returns the input unchanged when the normalized form has no node
    counterpart.
    """
    try:
        return from_sympy(to_sympy(expr))
    except ConversionError:
        logger.debug("Could not normalize %s", expr, exc_info=True)
        return expr
    except (TypeError, ValueError, ZeroDivisionError):
        logger.debug("SymPy failed normalizing %s", expr, exc_info=True)
        return expr


_NON_FINITE = (sp.zoo, sp.oo, -sp.oo, sp.nan)


def is_finite(expr: Expr) -> bool:
    """False when the expression collapses to an infinity or NaN anywhere."""
    try:
        value = to_sympy(expr)
    except (ConversionError, TypeError, ValueError, ZeroDivisionError):
        return False
    return not value.has(*_NON_FINITE)


def evaluate(expr: Expr, precision: int = 30) -> Optional[sp.Expr]:
    """Evaluate numerically to a complex SymPy number.

    Returns:
        The value (Float or Float + Float*I), or None if the expression still
        has free variables, contains unevaluated calculus nodes or is not finite.
    """
    try:
        value = to_sympy(expr)
        if value.free_symbols:
            return None
        value = sp.N(value, precision)
    except (ConversionError, TypeError, ValueError, ZeroDivisionError):
        return None
    if value.has(*_NON_FINITE) or not value.is_number:
        return None
    real, imag = value.as_real_imag()
    if not (real.is_Number and imag.is_Number):
        return None
    return value


def as_complex(value: sp.Expr) -> complex:
    real, imag = value.as_real_imag()
    return complex(float(real), float(imag))

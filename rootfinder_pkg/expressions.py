"""Immutable expression tree.

Every node kind is a frozen dataclass, so two structurally equal subtrees
compare and hash equal and can be shared between parents freely. A "change"
to a tree is always a new tree built by substitute().

The node kinds form a closed set:
- leaves: Number, Variable, Tensor
- operators: Sum, Difference, Product, Quotient, Power
- functions: the trigonometric family, Log, Factorial, Signum and the
  calculus nodes Derivative, Integral, Limit

Derivative, Integral and Limit keep their bound variable outside of the
child list: the variable of differentiation is not an occurrence.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, Iterator

import sympy as sp


def convert(value: Any) -> "Expr":
    """Wrap Python and SymPy numbers into Number and names into Variable."""
    if isinstance(value, Expr):
        return value
    if isinstance(value, str):
        return Variable(value)
    return Number(value)


@dataclass(frozen=True)
class Expr:
    _bound = ()  # field names that hold bound variables, not children

    def __add__(self, other):
        return Sum(self, convert(other))

    def __radd__(self, other):
        return Sum(convert(other), self)

    def __sub__(self, other):
        return Difference(self, convert(other))

    def __rsub__(self, other):
        return Difference(convert(other), self)

    def __mul__(self, other):
        return Product(self, convert(other))

    def __rmul__(self, other):
        return Product(convert(other), self)

    def __truediv__(self, other):
        return Quotient(self, convert(other))

    def __rtruediv__(self, other):
        return Quotient(convert(other), self)

    def __pow__(self, other):
        return Power(self, convert(other))

    def __rpow__(self, other):
        return Power(convert(other), self)

    def __neg__(self):
        return Product(Number(-1), self)

    def __str__(self):
        from .sympy_bridge import to_sympy

        return str(to_sympy(self))

    def direct_children(self) -> tuple[Expr, ...]:
        return tuple(
            getattr(self, f.name)
            for f in fields(self)
            if f.name not in self._bound and isinstance(getattr(self, f.name), Expr)
        )

    def with_children(self, children: Iterable[Expr]) -> Expr:
        """Rebuild this node around new children, in direct_children() order."""
        replacements = iter(children)
        attrs = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name not in self._bound and isinstance(value, Expr):
                value = next(replacements)
            attrs[f.name] = value
        return type(self)(**attrs)

    def nodes(self) -> Iterator[Expr]:
        """Depth-first pre-order traversal, the node itself first."""
        yield self
        for child in self.direct_children():
            yield from child.nodes()

    def contains(self, target: Expr) -> bool:
        return any(node == target for node in self.nodes())

    def count(self, target: Expr) -> int:
        return sum(1 for node in self.nodes() if node == target)

    def substitute(self, old: Expr, new: Expr) -> Expr:
        if self == old:
            return new
        children = self.direct_children()
        if not children:
            return self
        return self.with_children(child.substitute(old, new) for child in children)

    def variables(self) -> set[Variable]:
        return {node for node in self.nodes() if isinstance(node, Variable)}


@dataclass(frozen=True)
class Number(Expr):
    value: Any

    def __post_init__(self):
        value = sp.sympify(self.value)
        if not value.is_number:
            raise ValueError(f"Number requires a numeric value, got {value!r}")
        object.__setattr__(self, "value", value)

    @property
    def is_integer(self) -> bool:
        return bool(self.value.is_Integer)


@dataclass(frozen=True)
class Variable(Expr):
    name: str


@dataclass(frozen=True)
class Tensor(Expr):
    elements: tuple
    shape: tuple

    def direct_children(self) -> tuple[Expr, ...]:
        return tuple(self.elements)

    def with_children(self, children: Iterable[Expr]) -> Expr:
        return Tensor(tuple(children), self.shape)


# Operators


@dataclass(frozen=True)
class Sum(Expr):
    augend: Expr
    addend: Expr


@dataclass(frozen=True)
class Difference(Expr):
    subtrahend: Expr
    minuend: Expr


@dataclass(frozen=True)
class Product(Expr):
    multiplier: Expr
    multiplicand: Expr


@dataclass(frozen=True)
class Quotient(Expr):
    dividend: Expr
    divisor: Expr


@dataclass(frozen=True)
class Power(Expr):
    base: Expr
    exponent: Expr


# Functions


@dataclass(frozen=True)
class Function(Expr):
    pass


@dataclass(frozen=True)
class Sin(Function):
    argument: Expr


@dataclass(frozen=True)
class Cos(Function):
    argument: Expr


@dataclass(frozen=True)
class Tan(Function):
    argument: Expr


@dataclass(frozen=True)
class Cotan(Function):
    argument: Expr


@dataclass(frozen=True)
class Arcsin(Function):
    argument: Expr


@dataclass(frozen=True)
class Arccos(Function):
    argument: Expr


@dataclass(frozen=True)
class Arctan(Function):
    argument: Expr


@dataclass(frozen=True)
class Arccotan(Function):
    argument: Expr


@dataclass(frozen=True)
class Log(Function):
    base: Expr
    antilogarithm: Expr


@dataclass(frozen=True)
class Factorial(Function):
    argument: Expr


@dataclass(frozen=True)
class Signum(Function):
    argument: Expr


@dataclass(frozen=True)
class Derivative(Function):
    expression: Expr
    var: Variable
    order: int = 1
    _bound = ("var",)


@dataclass(frozen=True)
class Integral(Function):
    expression: Expr
    var: Variable
    order: int = 1
    _bound = ("var",)


@dataclass(frozen=True)
class Limit(Function):
    expression: Expr
    var: Variable
    destination: Expr
    _bound = ("var",)


E = Number(sp.E)
PI = Number(sp.pi)
IMAGINARY_UNIT = Number(sp.I)
ZERO = Number(0)
ONE = Number(1)


def sqrt(expr: Any) -> Power:
    return Power(convert(expr), Number(sp.Rational(1, 2)))


def exp(expr: Any) -> Power:
    return Power(E, convert(expr))


def ln(expr: Any) -> Log:
    return Log(E, convert(expr))


def fresh_variable(scope: Iterable[Expr], prefix: str = "n") -> Variable:
    """Return the first ``prefix_k`` variable not occurring in ``scope``.

    Uniqueness is relative to the given expressions only; the same scope
    always yields the same name.
    """
    taken = set()
    for expr in scope:
        for node in expr.nodes():
            if isinstance(node, Variable):
                taken.add(node.name)
            elif isinstance(node, (Derivative, Integral, Limit)):
                taken.add(node.var.name)
    index = 1
    while f"{prefix}_{index}" in taken:
        index += 1
    return Variable(f"{prefix}_{index}")


NODE_KINDS = (
    Number,
    Variable,
    Tensor,
    Sum,
    Difference,
    Product,
    Quotient,
    Power,
    Sin,
    Cos,
    Tan,
    Cotan,
    Arcsin,
    Arccos,
    Arctan,
    Arccotan,
    Log,
    Factorial,
    Signum,
    Derivative,
    Integral,
    Limit,
)

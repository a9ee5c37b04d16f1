"""Tests for the immutable expression tree."""

import pytest
import sympy as sp

from rootfinder_pkg.expressions import (
    NODE_KINDS,
    PI,
    Cos,
    Derivative,
    Difference,
    Integral,
    Number,
    Power,
    Product,
    Quotient,
    Sin,
    Sum,
    Variable,
    fresh_variable,
    ln,
    sqrt,
)

x = Variable("x")
y = Variable("y")


class TestConstruction:
    """Test building trees with Python operators."""

    def test_operators_build_binary_nodes(self):
        """Test that arithmetic operators produce the matching node kinds."""
        assert x + 1 == Sum(x, Number(1))
        assert x - 1 == Difference(x, Number(1))
        assert 2 * x == Product(Number(2), x)
        assert 1 / x == Quotient(Number(1), x)
        assert x**2 == Power(x, Number(2))

    def test_negation(self):
        """Test unary minus."""
        assert -x == Product(Number(-1), x)

    def test_number_rejects_symbols(self):
        """Test that Number only holds numeric values."""
        with pytest.raises(ValueError):
            Number(sp.Symbol("a"))

    def test_number_is_integer(self):
        """Test the integer predicate."""
        assert Number(3).is_integer
        assert not Number(sp.Rational(1, 2)).is_integer

    def test_structural_equality_and_hash(self):
        """Test that equal trees are interchangeable in sets."""
        assert Sin(x + 1) == Sin(x + 1)
        assert len({Sin(x + 1), Sin(x + 1), Cos(x + 1)}) == 2

    def test_str(self):
        """Test string rendering through SymPy."""
        assert str(x + 1) == "x + 1"
        assert str(sqrt(x)) == "sqrt(x)"


class TestTraversal:
    """Test traversal and occurrence queries."""

    def test_nodes_pre_order(self):
        """Test that nodes() yields parents before children, left to right."""
        expr = Sin(x) + y
        assert list(expr.nodes()) == [expr, Sin(x), x, y]

    def test_contains_and_count(self):
        """Test occurrence counting."""
        expr = Sin(x) ** 2 + Sin(x) + 1
        assert expr.contains(Sin(x))
        assert expr.count(Sin(x)) == 2
        assert expr.count(x) == 2
        assert not expr.contains(y)

    def test_substitute(self):
        """Test replacing every occurrence of a subtree."""
        expr = Sin(x) ** 2 + Sin(x)
        t = Variable("t")
        assert expr.substitute(Sin(x), t) == t**2 + t

    def test_bound_variable_is_not_an_occurrence(self):
        """Test that the variable of differentiation is not a child."""
        derivative = Derivative(x * y, y)
        assert derivative.direct_children() == (x * y,)
        assert not Derivative(x, y).contains(y)
        assert Integral(x, y, 2).order == 2

    def test_variables(self):
        """Test collecting variables."""
        assert (x * y + PI).variables() == {x, y}
        assert ln(Number(2)).variables() == set()


class TestFreshVariable:
    """Test fresh parameter generation."""

    def test_first_free_name(self):
        """Test that the first unused index is chosen."""
        assert fresh_variable([x], "n") == Variable("n_1")
        assert fresh_variable([x + Variable("n_1")], "n") == Variable("n_2")

    def test_same_scope_same_name(self):
        """Test that generation is deterministic for a scope."""
        scope = (Sin(x), Number(0))
        assert fresh_variable(scope, "n") == fresh_variable(scope, "n")

    def test_node_kinds_closed(self):
        """Test that every node kind is listed once."""
        assert len(NODE_KINDS) == len(set(NODE_KINDS)) == 22

"""Tests for conversion between expression trees and SymPy."""

import pytest
import sympy as sp

from rootfinder_pkg.expressions import (
    E,
    Cos,
    Difference,
    Log,
    Number,
    Power,
    Quotient,
    Sin,
    Tensor,
    Variable,
)
from rootfinder_pkg.sympy_bridge import evaluate, from_sympy, is_finite, simplify, to_sympy
from rootfinder_pkg.types import ConversionError

x = Variable("x")
sx = sp.Symbol("x")


class TestToSympy:
    """Test building SymPy objects."""

    def test_arithmetic(self):
        """Test operator nodes."""
        assert to_sympy(x**2 - 1) == sx**2 - 1

    def test_log_with_base(self):
        """Test that logarithms keep their base."""
        assert to_sympy(Log(Number(2), x)) == sp.log(sx, 2)
        assert to_sympy(Log(E, x)) == sp.log(sx)

    def test_exp(self):
        """Test that powers of E become exp."""
        assert to_sympy(Power(E, x)) == sp.exp(sx)


class TestFromSympy:
    """Test folding SymPy objects into binary nodes."""

    def test_negative_term_becomes_difference(self):
        """Test subtraction."""
        assert from_sympy(sx - 1) == Difference(x, Number(1))

    def test_negative_power_becomes_quotient(self):
        """Test reciprocals."""
        assert from_sympy(1 / sx) == Quotient(Number(1), x)

    def test_exp_becomes_power_of_e(self):
        """Test exponentials."""
        assert from_sympy(sp.exp(sx)) == Power(E, x)

    def test_secant_rewritten(self):
        """Test functions without a node kind of their own."""
        assert from_sympy(sp.sec(sx)) == Quotient(Number(1), Cos(x))

    def test_complex_literal(self):
        """Test that a + b*I stays a single number."""
        assert from_sympy(2 + 3 * sp.I) == Number(2 + 3 * sp.I)

    def test_matrix(self):
        """Test tensors."""
        assert from_sympy(sp.ImmutableMatrix([[1, 2]])) == Tensor((Number(1), Number(2)), (1, 2))

    def test_unsupported(self):
        """Test that unsupported kinds raise."""
        with pytest.raises(ConversionError):
            from_sympy(sp.Abs(sx))


class TestNumericHelpers:
    """Test simplify, evaluate and is_finite."""

    def test_simplify_folds_numbers(self):
        """Test cheap normalization."""
        assert simplify(Number(2) + Number(3)) == Number(5)
        assert simplify(Sin(x) + 0) == Sin(x)

    def test_evaluate(self):
        """Test numeric evaluation."""
        assert abs(evaluate(Sin(Number(sp.pi) / 2)) - 1) < 1e-12
        assert evaluate(x + 1) is None

    def test_non_finite(self):
        """Test division by zero detection."""
        assert not is_finite(Quotient(Number(1), Number(0)))
        assert evaluate(Quotient(Number(1), Number(0))) is None
        assert is_finite(x + 1)

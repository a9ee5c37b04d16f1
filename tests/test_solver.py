"""Tests for the equation solver."""

import pytest
import sympy as sp

from rootfinder_pkg.config import DEFAULT_SETTINGS
from rootfinder_pkg.expressions import (
    ZERO,
    Arcsin,
    Cos,
    E,
    Log,
    Number,
    Power,
    Sin,
    Tan,
    Variable,
    sqrt,
)
from rootfinder_pkg.solution_set import SolutionSet
from rootfinder_pkg.solver import solve, solve_equation
from rootfinder_pkg.types import ContractViolationError

x = Variable("x")
a = Variable("a")


class TestBasics:
    """Test trivial equations and contracts."""

    def test_variable_itself(self):
        """Test x = 0."""
        assert solve(x, x) == SolutionSet.of(ZERO)

    def test_missing_variable(self):
        """Test that solving for an absent variable fails the contract."""
        with pytest.raises(ContractViolationError):
            solve(Variable("y") + 1, x)

    def test_non_variable_target(self):
        """Test that only variables can be solved for."""
        with pytest.raises(ContractViolationError):
            solve_equation(Sin(x), Sin(x))


class TestPolynomials:
    """Test polynomial equations."""

    def test_two_factors(self, exact_settings):
        """Test (x - 1)(x - 2) = 0."""
        roots = solve((x - 1) * (x - 2), x, exact_settings)
        assert roots == SolutionSet.of(Number(1), Number(2))

    def test_parameters(self, assert_root, exact_settings):
        """Test a*x^2 - 1 = 0."""
        expr = a * x**2 - 1
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 2
        for root in roots:
            assert_root(expr, x, root)

    def test_odd_polynomial(self, assert_root, exact_settings):
        """Test 3x^5 + 5x^3 = 0."""
        expr = 3 * x**5 + 5 * x**3
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 3
        for root in roots:
            assert_root(expr, x, root)


class TestShortcuts:
    """Test structural shortcuts."""

    def test_product(self, assert_root, exact_settings):
        """Test that either factor may vanish."""
        expr = x * Sin(x)
        roots = solve(expr, x, exact_settings)
        assert ZERO in roots
        assert len(roots) == 3
        for root in roots:
            assert_root(expr, x, root)

    def test_constant_factor(self, exact_settings):
        """Test that a constant factor contributes nothing."""
        assert len(solve(2 * Sin(x), x, exact_settings)) == 2

    def test_quotient_excludes_poles(self, exact_settings):
        """Test (x^2 - 1)/(x - 1) = 0."""
        roots = solve((x**2 - 1) / (x - 1), x, exact_settings)
        assert roots == SolutionSet.of(Number(-1))

    def test_power(self, exact_settings):
        """Test sqrt(x - 3) = 0."""
        assert solve(sqrt(x - 3), x, exact_settings) == SolutionSet.of(Number(3))

    def test_exponential_never_zero(self, exact_settings):
        """Test e^x = 0."""
        assert solve(Power(E, x), x, exact_settings).is_empty

    def test_compensating_difference(self, assert_root, exact_settings):
        """Test paying back sin(x) - 1 directly."""
        expr = Sin(x) - 1
        roots = solve(expr, x, exact_settings, compensating=True)
        assert len(roots) == 1
        for root in roots:
            assert_root(expr, x, root)


class TestSubstitution:
    """Test change-of-variable solving."""

    def test_sin_plus_cos(self, assert_root, exact_settings):
        """Test sin(x) + cos(x) - 1 = 0."""
        expr = Sin(x) + Cos(x) - 1
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 2
        for root in roots:
            assert_root(expr, x, root)

    def test_quadratic_in_sin(self, assert_root, exact_settings):
        """Test sin(x)^2 + sin(x) - 2 = 0."""
        expr = Sin(x) ** 2 + Sin(x) - 2
        roots = solve(expr, x, exact_settings)
        assert roots
        for root in roots:
            assert_root(expr, x, root)

    def test_sin_half(self, assert_root, exact_settings):
        """Test sin(x) = 1/2 yields two families."""
        expr = Sin(x) - Number(sp.Rational(1, 2))
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 2
        for root in roots:
            assert_root(expr, x, root)

    def test_logarithm(self, assert_root, exact_settings):
        """Test log_x(32) = 5."""
        expr = Log(x, Number(32)) - 5
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 1
        for root in roots:
            assert_root(expr, x, root)

    def test_natural_logarithm(self, assert_root, exact_settings):
        """Test ln(x) = 2."""
        expr = Log(E, x) - 2
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 1
        for root in roots:
            assert_root(expr, x, root)

    def test_exponential(self, assert_root, exact_settings):
        """Test 2^x = 8."""
        expr = Power(Number(2), x) - 8
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 1
        for root in roots:
            assert_root(expr, x, root)

    def test_reciprocal(self, exact_settings):
        """Test 1/x = 2."""
        assert solve(1 / x - 2, x, exact_settings) == SolutionSet.of(Number(sp.Rational(1, 2)))

    def test_tangent_of_polynomial(self, assert_root, exact_settings):
        """Test tan(x^2 + x) = 1."""
        expr = Tan(x**2 + x) - 1
        roots = solve(expr, x, exact_settings)
        assert len(roots) == 2
        for root in roots:
            assert_root(expr, x, root)

    def test_arcsin_out_of_range(self, exact_settings):
        """Test arcsin(x) = 2 has no solutions."""
        assert solve(Arcsin(x) - 2, x, exact_settings).is_empty

    def test_empty_union_is_not_final(self, exact_settings):
        """Test arcsin(x)^2 = 16, whose substituted roots 4 and -4 are out of range."""
        assert solve(Arcsin(x) ** 2 - 16, x, exact_settings).is_empty


class TestFallbacks:
    """Test pattern solvers and numeric fallback reached through solve()."""

    def test_square_root_equation(self, exact_settings):
        """Test x + sqrt(x) = 6."""
        roots = solve(x + sqrt(x) - 6, x, exact_settings)
        assert roots == SolutionSet.of(Number(4))

    def test_numeric_fallback(self):
        """Test cos(x) = x, which has no closed form."""
        roots = solve(Cos(x) - x, x, DEFAULT_SETTINGS.override(numeric_fallback=True))
        assert roots

    def test_numeric_fallback_disabled(self, exact_settings):
        """Test that without numeric fallback cos(x) = x yields nothing."""
        assert solve(Cos(x) - x, x, exact_settings).is_empty

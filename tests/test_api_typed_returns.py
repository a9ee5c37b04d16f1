"""Tests for the text-level API and its typed results."""

from rootfinder_pkg.api import parse_equation, solve_equation
from rootfinder_pkg.config import DEFAULT_SETTINGS
from rootfinder_pkg.expressions import Difference, Number, Variable
from rootfinder_pkg.types import SolveResult

EXACT = DEFAULT_SETTINGS.override(numeric_fallback=False)


class TestParseEquation:
    """Test splitting equations into one expression."""

    def test_sides_are_subtracted(self):
        """Test that lhs = rhs becomes lhs - rhs."""
        assert parse_equation("x = 1") == Difference(Variable("x"), Number(1))

    def test_bare_expression(self):
        """Test that a bare expression means = 0."""
        assert parse_equation("x - 1") == parse_equation("x = 1")


class TestSolveEquation:
    """Test solve_equation results."""

    def test_returns_solve_result(self):
        """Test the result type."""
        result = solve_equation("x^2 = 4", settings=EXACT)
        assert isinstance(result, SolveResult)
        assert result.ok
        assert result.variable == "x"
        assert sorted(result.exact) == ["-2", "2"]
        assert sorted(result.approx) == ["-2", "2"]

    def test_rational_root(self):
        """Test a linear equation with a fractional root."""
        result = solve_equation("2*x + 1", settings=EXACT)
        assert result.exact == ["-1/2"]
        assert result.approx == ["-0.5"]

    def test_periodic_roots_have_no_approximation(self):
        """Test that parameterized roots are reported exactly only."""
        result = solve_equation("sin(x) = 1/2", settings=EXACT)
        assert result.ok
        assert len(result.exact) == 2
        assert all("n_1" in root for root in result.exact)
        assert result.approx == [None, None]

    def test_explicit_variable(self):
        """Test solving for a chosen variable."""
        result = solve_equation("a*y + 2 = 0", "y", settings=EXACT)
        assert result.variable == "y"
        assert result.exact == ["-2/a"]

    def test_default_variable(self):
        """Test that x is preferred, else the first variable alphabetically."""
        assert solve_equation("y + x = 1", settings=EXACT).variable == "x"
        assert solve_equation("b + a = 1", settings=EXACT).variable == "a"

    def test_no_roots(self):
        """Test an equation without solutions."""
        result = solve_equation("exp(x) = 0", settings=EXACT)
        assert result.ok
        assert result.exact == []

    def test_to_dict(self):
        """Test JSON-ready output."""
        data = solve_equation("x = 3", settings=EXACT).to_dict()
        assert data == {
            "ok": True,
            "type": "equation",
            "variable": "x",
            "exact": ["3"],
            "approx": ["3"],
        }

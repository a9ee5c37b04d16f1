"""Public API for rootfinder - returns structured objects without side effects."""

from __future__ import annotations

from .config import DEFAULT_SETTINGS, VAR_NAME_RE, SolverSettings
from .expressions import Expr, Variable
from .logging_config import get_logger
from .parser import format_number, parse_preprocessed, preprocess
from .solver import solve_equation as _solve_equation
from .sympy_bridge import evaluate, from_sympy
from .types import ContractViolationError, ConversionError, ParseError, SolveResult, ValidationError

logger = get_logger("api")


def parse_equation(equation: str) -> Expr:
    """Parse ``lhs = rhs`` (or a bare expression meaning ``= 0``) into ``lhs - rhs``.

    Raises:
        ValidationError: if the input is malformed or rejected
        ParseError: if a side cannot be parsed or converted
    """
    if equation.count("=") > 1:
        raise ValidationError("Equation must contain at most one '='", "INVALID_FORMAT")
    lhs, _, rhs = equation.partition("=")
    if "=" in equation and not (lhs.strip() and rhs.strip()):
        raise ValidationError("Both sides of '=' must be non-empty", "INVALID_FORMAT")
    difference = parse_preprocessed(preprocess(lhs))
    if rhs.strip():
        difference = difference - parse_preprocessed(preprocess(rhs))
    try:
        return from_sympy(difference)
    except ConversionError as e:
        raise ParseError(f"Unsupported expression in '{equation}': {e}", "UNSUPPORTED") from e


def _choose_variable(expr: Expr, find_var: str | None) -> Variable | None:
    names = sorted(v.name for v in expr.variables())
    if find_var is not None:
        return Variable(find_var) if find_var in names else None
    if not names:
        return None
    return Variable("x") if "x" in names else Variable(names[0])


def solve_equation(
    equation: str,
    find_var: str | None = None,
    settings: SolverSettings | None = None,
) -> SolveResult:
    """Solve a single equation.

    Args:
        equation: Equation string (e.g., "x+1=0", "sin(x) = 1/2")
        find_var: Optional variable to solve for (e.g., "x"); defaults to
            ``x`` when present, else the alphabetically first variable
        settings: Solver settings (defaults from the environment)

    Returns:
        SolveResult with the exact roots and their numeric approximations
        (None for roots that depend on a free parameter)

    Example:
        >>> from rootfinder_pkg.api import solve_equation
        >>> result = solve_equation("(x - 1)*(x - 2) = 0")
        >>> print(result.exact)
        ['1', '2']
    """
    settings = settings or DEFAULT_SETTINGS
    if find_var is not None and not VAR_NAME_RE.match(find_var):
        return SolveResult(
            ok=False, error=f"Invalid variable name '{find_var}'", error_code="INVALID_VARIABLE"
        )
    try:
        expr = parse_equation(equation)
    except ValidationError as e:
        return SolveResult(ok=False, error=str(e), error_code=e.code)
    except ParseError as e:
        return SolveResult(ok=False, error=str(e), error_code=e.code)

    variable = _choose_variable(expr, find_var)
    if variable is None:
        target = f"'{find_var}'" if find_var else "any variable"
        return SolveResult(
            ok=False,
            error=f"Equation does not depend on {target}",
            error_code="VARIABLE_NOT_FOUND",
        )

    try:
        roots = _solve_equation(expr, variable, settings)
    except ContractViolationError as e:
        logger.error("Contract violation while solving %s", equation, exc_info=True)
        return SolveResult(ok=False, variable=variable.name, error=str(e), error_code=e.code)

    if not roots.is_finite:
        return SolveResult(ok=True, result_type="infinite", variable=variable.name)
    exact = [str(root) for root in roots]
    approx = []
    for root in roots:
        value = evaluate(root, settings.precision)
        approx.append(None if value is None else format_number(value))
    return SolveResult(ok=True, variable=variable.name, exact=exact, approx=approx)

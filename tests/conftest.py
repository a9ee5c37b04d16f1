"""Shared fixtures for rootfinder tests."""

import logging

import pytest

from rootfinder_pkg.config import DEFAULT_SETTINGS
from rootfinder_pkg.expressions import Number
from rootfinder_pkg.sympy_bridge import evaluate


def _check_root(expr, x, root, tolerance=1e-3):
    substituted = expr.substitute(x, root)
    # remaining free variables (parameters, periodic n_k) get distinct small values
    for value, variable in enumerate(sorted(substituted.variables(), key=lambda v: v.name), start=3):
        substituted = substituted.substitute(variable, Number(value))
    residual = evaluate(substituted)
    assert residual is not None, f"{root} could not be evaluated in {expr}"
    assert abs(residual) < tolerance, f"{root} leaves residual {residual} in {expr}"


@pytest.fixture
def assert_root():
    """Check that a root makes the expression vanish."""
    return _check_root


@pytest.fixture
def exact_settings():
    """Settings without numeric fallback, for counting exact roots."""
    return DEFAULT_SETTINGS.override(numeric_fallback=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the CLI so they do not leak between tests."""
    yield
    logger = logging.getLogger("rootfinder")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)

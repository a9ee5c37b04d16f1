"""Structural analysis used for change-of-variable solving."""

from __future__ import annotations

from itertools import takewhile
from typing import Iterator

import sympy as sp

from .config import MAX_ALTERNATE_FORMS
from .expressions import Expr
from .logging_config import get_logger
from .sympy_bridge import from_sympy, to_sympy
from .types import ContractViolationError, ConversionError

logger = get_logger("tree_analysis")

_REARRANGEMENTS = (sp.simplify, sp.expand, sp.factor, sp.together)


def minimal_subtree(expr: Expr, x: Expr) -> Expr:
    """Find the smallest subtree whose occurrences cover every occurrence of ``x``.

    For ``sin(x)^2 + sin(x) + 1`` this is ``sin(x)``: solving ``t^2 + t + 1 = 0``
    and then ``sin(x) = t`` solves the original equation. The expression itself
    always covers every ``x``, so for ``x^2 + x`` the whole expression is
    returned; ``x`` comes back only when ``expr`` is ``x``.

    Raises:
        ContractViolationError: if ``expr`` does not contain ``x``
    """
    if not expr.contains(x):
        raise ContractViolationError(f"{expr} must contain {x}")
    total = expr.count(x)
    result = x
    # pre-order, so every candidate above the first x is visited before it
    for candidate in takewhile(lambda node: node != x, expr.nodes()):
        if not candidate.contains(x):
            continue
        # 2 occurrences of sub, each with 3 x's, must account for all 6 x's
        if expr.count(candidate) * candidate.count(x) == total:
            result = candidate
    return result


def alternate_forms(expr: Expr, limit: int = MAX_ALTERNATE_FORMS) -> Iterator[Expr]:
    """Yield up to ``limit`` distinct equivalent forms, ``expr`` itself first."""
    seen = [expr]
    yield expr
    try:
        original = to_sympy(expr)
    except ConversionError:
        return
    for rearrange in _REARRANGEMENTS:
        if len(seen) >= limit:
            return
        try:
            candidate = from_sympy(rearrange(original))
        except ConversionError:
            logger.debug("%s produced an unsupported form", rearrange.__name__)
            continue
        except (sp.polys.polyerrors.PolynomialError, NotImplementedError, TypeError, ValueError):
            logger.debug("%s failed on %s", rearrange.__name__, original, exc_info=True)
            continue
        if candidate not in seen:
            seen.append(candidate)
            yield candidate

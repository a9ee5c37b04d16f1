"""Input parsing and preprocessing module.

This module handles:
- Input sanitization and validation
- Expression preprocessing (unicode symbols, exponents)
- SymPy expression parsing with security validation
- Conversion of the parsed expression into an expression tree
- Result formatting for numeric approximations
"""

from __future__ import annotations

import re
from tokenize import TokenError
from typing import Any

import sympy as sp
from sympy import parse_expr

from .config import (
    ALLOWED_SYMPY_NAMES,
    MAX_EXPRESSION_DEPTH,
    MAX_EXPRESSION_NODES,
    MAX_INPUT_LENGTH,
    OUTPUT_PRECISION,
    TRANSFORMATIONS,
)
from .expressions import Expr
from .logging_config import get_logger
from .sympy_bridge import from_sympy
from .types import ConversionError, ParseError, ValidationError

logger = get_logger("parser")

_UNICODE_REPLACEMENTS = {
    "−": "-",
    "×": "*",
    "·": "*",
    "÷": "/",
    "π": "pi",
    "√": "sqrt",
}

_SUPERSCRIPTS = str.maketrans("⁰¹²³⁴⁵⁶⁷⁸⁹⁻", "0123456789-")
_SUPERSCRIPT_RUN = re.compile(r"[⁰¹²³⁴⁵⁶⁷⁸⁹⁻]+")

# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
)


def format_number(val: Any, precision: int = OUTPUT_PRECISION) -> str:
    """Format a real or complex numeric value with specified precision.

    Args:
        val: Numeric value to format (SymPy number or Python number)
        precision: Number of significant digits (default: OUTPUT_PRECISION)

    Returns:
        Formatted string representation of the number
    """
    fmt = "{:." + str(int(precision)) + "g}"
    try:
        value = complex(val)
    except (ValueError, TypeError, OverflowError):
        return str(val)
    if value.imag == 0:
        return fmt.format(value.real)
    sign = "-" if value.imag < 0 else "+"
    return f"{fmt.format(value.real)} {sign} {fmt.format(abs(value.imag))}*I"


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses/brackets are balanced. Returns (is_balanced, error_position)."""
    pairs = {"(": ")", "[": "]", "{": "}"}
    stack: list[tuple[str, int]] = []  # (char, position)
    for i, char in enumerate(input_str):
        if char in pairs:
            stack.append((char, i))
        elif char in pairs.values():
            if not stack:
                return False, i
            opening, pos = stack.pop()
            if pairs[opening] != char:
                return False, i
    if stack:
        return False, stack[0][1]  # Return position of first unmatched
    return True, None


def _validate_expression_tree(expr: Any, depth: int = 0, node_count: list[int] | None = None) -> None:
    """Validate expression tree structure - reject dangerous nodes and oversized trees."""
    if node_count is None:
        node_count = [0]
    node_count[0] += 1
    if node_count[0] > MAX_EXPRESSION_NODES:
        raise ValidationError(
            f"Expression too complex (>{MAX_EXPRESSION_NODES} nodes)", "TOO_COMPLEX"
        )
    if depth > MAX_EXPRESSION_DEPTH:
        raise ValidationError(
            f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)", "TOO_DEEP"
        )
    if not isinstance(expr, sp.Basic):
        raise ValidationError(
            f"Expression type '{type(expr).__name__}' not allowed", "FORBIDDEN_TYPE"
        )
    if isinstance(expr, sp.Function) and not isinstance(expr, (sp.exp, sp.log)):
        func_name = expr.func.__name__
        allowed = {getattr(f, "__name__", None) for f in ALLOWED_SYMPY_NAMES.values()}
        if func_name not in allowed:
            # Audit log blocked function
            logger.warning("Blocked forbidden function %s", func_name)
            raise ValidationError(
                f"Function '{func_name}' not allowed", "FORBIDDEN_FUNCTION"
            )
    for arg in expr.args:
        _validate_expression_tree(arg, depth + 1, node_count)


def preprocess(input_str: str) -> str:
    """Preprocess input string for parsing.

    Applies transformations:
    - Validates input length and forbidden tokens
    - Standardizes mathematical symbols (unicode variants to ASCII)
    - Converts superscript exponents (x² -> x**2)
    - Validates balanced parentheses/brackets

    Raises:
        ValidationError: If input is empty, too long, contains forbidden
                        tokens or has unbalanced parentheses/brackets
    """
    input_str = input_str.strip() if input_str else ""
    if not input_str:
        raise ValidationError("Input cannot be empty", "EMPTY_INPUT")
    if len(input_str) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    lowered = input_str.lower()
    for token in FORBIDDEN_TOKENS:
        if token in lowered:
            raise ValidationError(f"Forbidden token '{token}' in input", "FORBIDDEN_TOKEN")

    processed = input_str
    for symbol, replacement in _UNICODE_REPLACEMENTS.items():
        processed = processed.replace(symbol, replacement)
    processed = _SUPERSCRIPT_RUN.sub(
        lambda m: "**(" + m.group(0).translate(_SUPERSCRIPTS) + ")", processed
    )

    balanced, position = is_balanced(processed)
    if not balanced:
        raise ValidationError(
            f"Unbalanced parentheses or brackets at position {position}", "UNBALANCED_PARENS"
        )
    return processed


def parse_preprocessed(expr_str: str) -> sp.Basic:
    """Parse and validate a preprocessed expression string into SymPy."""
    try:
        parsed = parse_expr(
            expr_str, local_dict=ALLOWED_SYMPY_NAMES, transformations=TRANSFORMATIONS
        )
    except (SyntaxError, TypeError, ValueError, AttributeError, TokenError) as e:
        raise ParseError(f"Could not parse '{expr_str}': {e}") from e
    _validate_expression_tree(parsed)
    return parsed


def parse_expression(input_str: str) -> Expr:
    """Parse user input into an expression tree.

    Raises:
        ValidationError: if the input is rejected before parsing
        ParseError: if SymPy cannot parse it or the result has no tree form
    """
    parsed = parse_preprocessed(preprocess(input_str))
    try:
        return from_sympy(parsed)
    except ConversionError as e:
        raise ParseError(f"Unsupported expression '{input_str}': {e}", "UNSUPPORTED") from e


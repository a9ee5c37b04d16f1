"""Command-line interface for rootfinder.

Usage:
    rootfinder "sin(x) = 1/2"
    rootfinder "a*x^2 + b = 0" --var x --format json
    python -m rootfinder_pkg "x^3 = 8" --no-numeric-fallback
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from .api import solve_equation
from .config import DEFAULT_SETTINGS, VERSION
from .logging_config import setup_logging


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Result dictionary
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        return
    typ = res.get("type", "equation")
    if typ == "infinite":
        print(f"Infinitely many solutions for {res.get('variable')}")
        return
    exact_sols = res.get("exact", [])
    approx_sols = res.get("approx", [])
    if not exact_sols:
        print(f"No solutions found for {res.get('variable')}")
        return
    print(f"{res.get('variable')} =", ", ".join(exact_sols))
    approx_display = ", ".join(value for value in approx_sols if value is not None)
    if approx_display:
        print("Approx:", approx_display)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the rootfinder CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        prog="rootfinder", description="Solve an equation analytically"
    )
    parser.add_argument(
        "equation", nargs="?", help="Equation to solve, e.g. 'x^2 = 4' ('= 0' if omitted)"
    )
    parser.add_argument("--var", type=str, help="Variable to solve for (default: x)")
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "--no-numeric-fallback",
        action="store_true",
        help="Disable numeric root-finding fallback",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if not args.equation:
        parser.print_usage()
        return 2

    settings = DEFAULT_SETTINGS
    if args.no_numeric_fallback:
        settings = settings.override(numeric_fallback=False)

    result = solve_equation(args.equation, args.var, settings)
    print_result_pretty(result.to_dict(), args.format)
    return 0 if result.ok else 1

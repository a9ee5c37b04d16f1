"""rootfinder package: analytical equation solving over immutable expression trees."""

__all__ = [
    "api",
    "cli",
    "config",
    "downcast",
    "expressions",
    "inversion",
    "linear_solvers",
    "logging_config",
    "numeric",
    "parser",
    "polynomial",
    "rational_solvers",
    "solution_set",
    "solver",
    "sympy_bridge",
    "tree_analysis",
    "types",
]

# Public API exports

__api_exports__ = [
    "solve_equation",
    "parse_equation",
]

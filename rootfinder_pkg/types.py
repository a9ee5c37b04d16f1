"""Type definitions, result dataclasses and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class SolveResult:
    """Result of solving an equation through the text API."""

    ok: bool
    result_type: str = "equation"
    variable: str | None = None
    error: str | None = None
    error_code: str | None = None
    exact: list[str] | None = None
    approx: list[str | None] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok, "type": self.result_type}
        if self.variable is not None:
            result_dict["variable"] = self.variable
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.exact is not None:
            result_dict["exact"] = self.exact
        if self.approx is not None:
            result_dict["approx"] = self.approx
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"SolveResult(ok=False, error_code={self.error_code!r}, error={self.error!r})"
        parts = [f"ok={self.ok}", f"result_type={self.result_type!r}"]
        if self.variable is not None:
            parts.append(f"variable={self.variable!r}")
        if self.exact is not None:
            parts.append(f"exact={self.exact!r}")
        if self.approx is not None:
            parts.append(f"approx={self.approx!r}")
        return f"SolveResult({', '.join(parts)})"


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ParseError(Exception):
    """Raised when parsing fails."""

    def __init__(self, message: str, code: str = "PARSE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class SolverError(Exception):
    """Raised when solving fails."""

    def __init__(self, message: str, code: str = "SOLVER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ContractViolationError(SolverError):
    """Raised when an internal precondition is broken by the caller.

    This is a programming error (e.g. inverting a tree that does not contain
    the target), never a "no solution" outcome.
    """

    def __init__(self, message: str):
        super().__init__(message, code="CONTRACT_VIOLATION")


class ConversionError(SolverError):
    """Raised when a SymPy object has no counterpart among expression nodes."""

    def __init__(self, message: str):
        super().__init__(message, code="CONVERSION_ERROR")

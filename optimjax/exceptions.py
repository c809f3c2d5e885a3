"""Exception hierarchy for the interior-point optimizer."""

from __future__ import annotations

import enum


class ErrorCode(enum.Enum):
    """Error categories reported by optimjax exceptions."""
    DIMENSION_MISMATCH = 1
    SINGULAR_KKT_MATRIX = 2
    NON_FINITE_KKT_SOLUTION = 3
    NOT_DECOMPOSED = 4
    NON_POSITIVE_DIAGONAL = 5


_ERROR_MESSAGES = {
    ErrorCode.DIMENSION_MISMATCH: "dimension mismatch",
    ErrorCode.SINGULAR_KKT_MATRIX: "KKT matrix is singular",
    ErrorCode.NON_FINITE_KKT_SOLUTION: "KKT solution is not finite",
    ErrorCode.NOT_DECOMPOSED: "KKT solver used before decompose",
    ErrorCode.NON_POSITIVE_DIAGONAL: "expected a positive diagonal Hessian block",
}


class OptimjaxError(Exception):
    """Base exception for optimizer errors.
    
    Args:
        message: Human readable description.
        error_code: Category of the failure.
    """

    def __init__(self, message: str, error_code: ErrorCode) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message

    def __str__(self) -> str:
        return f"optimjax error {self.error_code.value} ({error_code_to_string(self.error_code)}): {self.message}"


class DimensionError(OptimjaxError):
    """Raised when problem callbacks or state vectors have inconsistent shapes."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.DIMENSION_MISMATCH) -> None:
        super().__init__(message, error_code)


class KktError(OptimjaxError):
    """Raised when the KKT system cannot be factorized or solved."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.SINGULAR_KKT_MATRIX) -> None:
        super().__init__(message, error_code)


def error_code_to_string(error_code: ErrorCode) -> str:
    """Convert an error code to its short description."""
    return _ERROR_MESSAGES.get(error_code, "unknown error")

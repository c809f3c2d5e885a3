"""Validation and checking utilities."""

from typing import Tuple, Union

import jax.numpy as jnp

from optimjax.exceptions import DimensionError
from optimjax.hessian import DiagonalHessian, Hessian, hessian_size


def _mismatch(quantity: str, expected: Union[int, Tuple[int, ...]], got: Union[int, Tuple[int, ...]]) -> DimensionError:
    return DimensionError(f"{quantity} has shape {got}, expected {expected}")


def check_vector_shape(name: str, value: jnp.ndarray, size: int) -> None:
    """Check that a vector has shape (size,).
    
    Raises:
        DimensionError: If the shape does not match.
    """
    if value.shape != (size,):
        raise _mismatch(name, (size,), value.shape)


def check_matrix_shape(name: str, value: jnp.ndarray, shape: Tuple[int, int]) -> None:
    """Check that a matrix has the given shape.
    
    Raises:
        DimensionError: If the shape does not match.
    """
    if value.shape != shape:
        raise _mismatch(name, shape, value.shape)


def check_hessian_shape(H: Hessian, n: int) -> None:
    """Check that a Hessian acts on n variables and is well formed."""
    size = hessian_size(H)
    if size != n:
        raise _mismatch("objective Hessian", n, size)
    if isinstance(H, DiagonalHessian):
        check_vector_shape("Hessian diagonal", H.diagonal, n)
        return
    for field_name in ("matrix", "inverse"):
        array = getattr(H, field_name, None)
        if array is not None:
            check_matrix_shape(f"Hessian {field_name}", array, (n, n))


def check_evaluation_shapes(
    n: int,
    m: int,
    g: jnp.ndarray,
    h: jnp.ndarray,
    A: jnp.ndarray,
) -> None:
    """Check the shapes returned by the problem callbacks.
    
    Args:
        n: Number of variables.
        m: Number of equality constraints.
        g: Objective gradient, expected (n,).
        h: Constraint residual, expected (m,).
        A: Constraint Jacobian, expected (m, n).
    """
    check_vector_shape("objective gradient", g, n)
    check_vector_shape("constraint residual", h, m)
    check_matrix_shape("constraint Jacobian", A, (m, n))

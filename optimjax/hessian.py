"""Hessian representations consumed by the KKT solver.

An objective Hessian can be supplied in one of three forms. The KKT solver
dispatches on the concrete type to pick the cheapest factorization:

    DenseHessian      the full n x n matrix
    DiagonalHessian   only the diagonal, as a length n vector
    InverseHessian    the inverse of the n x n Hessian matrix
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import jax
import jax.numpy as jnp
from jax import tree_util


@dataclass(frozen=True)
class DenseHessian:
    """Hessian stored as a dense matrix.
    
    Args:
        matrix: The (n, n) Hessian matrix.
    """
    matrix: jnp.ndarray


@dataclass(frozen=True)
class DiagonalHessian:
    """Hessian stored as its diagonal.
    
    Args:
        diagonal: The (n,) diagonal entries.
    """
    diagonal: jnp.ndarray


@dataclass(frozen=True)
class InverseHessian:
    """Hessian represented through its inverse.
    
    Args:
        inverse: The (n, n) inverse of the Hessian matrix.
    """
    inverse: jnp.ndarray


Hessian = Union[DenseHessian, DiagonalHessian, InverseHessian]


# Register Hessian variants as JAX pytrees
tree_util.register_pytree_node(
    DenseHessian,
    lambda h: ((h.matrix,), None),
    lambda aux, children: DenseHessian(children[0]),
)
tree_util.register_pytree_node(
    DiagonalHessian,
    lambda h: ((h.diagonal,), None),
    lambda aux, children: DiagonalHessian(children[0]),
)
tree_util.register_pytree_node(
    InverseHessian,
    lambda h: ((h.inverse,), None),
    lambda aux, children: InverseHessian(children[0]),
)


def as_hessian(value: Any) -> Hessian:
    """Normalize the output of a Hessian callback.
    
    Hessian instances are returned unchanged. A 2-D array is taken as a dense
    Hessian and a 1-D array as a diagonal one.
    
    Raises:
        TypeError: If the value cannot be interpreted as a Hessian.
    """
    if isinstance(value, (DenseHessian, DiagonalHessian, InverseHessian)):
        return value
    
    try:
        array = jnp.asarray(value)
    except TypeError as e:
        raise TypeError(f"Cannot interpret {type(value).__name__} as a Hessian") from e
    
    if array.ndim == 2:
        return DenseHessian(array)
    if array.ndim == 1:
        return DiagonalHessian(array)
    raise TypeError(f"Hessian arrays must be 1-D or 2-D, got shape {array.shape}")


def hessian_size(H: Hessian) -> int:
    """Number of variables the Hessian acts on."""
    if isinstance(H, DiagonalHessian):
        return int(H.diagonal.shape[0])
    if isinstance(H, DenseHessian):
        return int(H.matrix.shape[0])
    return int(H.inverse.shape[0])


@jax.jit
def hessian_dot(H: Hessian, v: jnp.ndarray) -> jnp.ndarray:
    """Return the product H @ v for any Hessian representation."""
    if isinstance(H, DiagonalHessian):
        return H.diagonal * v
    if isinstance(H, DenseHessian):
        return H.matrix @ v
    return jnp.linalg.solve(H.inverse, v)


def to_dense(H: Hessian) -> jnp.ndarray:
    """Return the dense (n, n) Hessian matrix."""
    if isinstance(H, DiagonalHessian):
        return jnp.diag(H.diagonal)
    if isinstance(H, DenseHessian):
        return H.matrix
    return jnp.linalg.inv(H.inverse)

"""Iterate state of an optimization solve."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

import jax.numpy as jnp

from optimjax.hessian import Hessian


def _empty() -> jnp.ndarray:
    return jnp.zeros(0)


@dataclass
class OptimumState:
    """Mutable snapshot of the primal-dual iterate.
    
    The solver mutates the state in place. After initialization and after
    every accepted step both ``x`` and ``z`` are strictly positive. A state
    returned by a previous solve can be passed again to warm start.
    
    Args:
        x: Primal variables (n,).
        y: Equality constraint multipliers (m,).
        z: Bound constraint multipliers (n,).
        f: Objective value at x.
        g: Objective gradient at x.
        H: Objective Hessian at x.
        h: Constraint residual at x.
        A: Constraint Jacobian at x.
    """
    x: jnp.ndarray = field(default_factory=_empty)
    y: jnp.ndarray = field(default_factory=_empty)
    z: jnp.ndarray = field(default_factory=_empty)
    f: float = 0.0
    g: jnp.ndarray = field(default_factory=_empty)
    H: Optional[Hessian] = None
    h: jnp.ndarray = field(default_factory=_empty)
    A: jnp.ndarray = field(default_factory=lambda: jnp.zeros((0, 0)))

    def copy(self) -> OptimumState:
        """Structural copy; JAX arrays are immutable so they are shared."""
        return replace(self)

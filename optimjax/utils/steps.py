"""Step-length and norm helpers shared by the interior-point solvers."""

import jax
import jax.numpy as jnp


@jax.jit
def fraction_to_the_boundary(v: jnp.ndarray, dv: jnp.ndarray, tau: float) -> jnp.ndarray:
    """Compute the largest step keeping v + alpha * dv >= (1 - tau) * v.
    
    Only components with dv < 0 restrict the step. The result is capped at
    one, so a direction moving away from every bound gives a full step.
    
    Args:
        v: Current strictly positive iterate.
        dv: Proposed step direction.
        tau: Boundary fraction in (0, 1).
        
    Returns:
        Step length alpha in (0, 1].
    """
    negative = dv < 0
    # Replace non-restricting denominators to avoid division by zero
    safe_dv = jnp.where(negative, dv, -1.0)
    ratios = jnp.where(negative, -tau * v / safe_dv, jnp.inf)
    return jnp.minimum(1.0, jnp.min(ratios, initial=jnp.inf))


def norm_inf(v: jnp.ndarray) -> float:
    """Infinity norm of a vector, zero for empty vectors."""
    if v.size == 0:
        return 0.0
    return float(jnp.max(jnp.abs(v)))

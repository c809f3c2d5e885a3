"""Definition of the constrained optimization problem.

The solver only consumes the problem through its callbacks:

    objective(x)            -> scalar
    objective_grad(x)       -> (n,)
    objective_hessian(x, g) -> Hessian (dense, diagonal or inverse)
    constraint(x)           -> (m,)
    constraint_grad(x)      -> (m, n)

Callbacks left as None are derived with JAX automatic differentiation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import jax
import jax.numpy as jnp

from optimjax.hessian import DenseHessian, Hessian, as_hessian

ObjectiveFunction = Callable[[jnp.ndarray], jnp.ndarray]
GradientFunction = Callable[[jnp.ndarray], jnp.ndarray]
HessianFunction = Callable[[jnp.ndarray, jnp.ndarray], Hessian]
ConstraintFunction = Callable[[jnp.ndarray], jnp.ndarray]
JacobianFunction = Callable[[jnp.ndarray], jnp.ndarray]


@dataclass(frozen=True)
class OptimumProblem:
    """Problem of the form min f(x) subject to h(x) = 0 and x >= 0.
    
    Args:
        num_variables: Number of variables n.
        num_constraints: Number of equality constraints m.
        objective: Objective function f(x).
        objective_grad: Gradient of f. Defaults to ``jax.grad(objective)``.
        objective_hessian: Hessian of f given x and the gradient. Defaults to
            the dense ``jax.hessian(objective)``.
        constraint: Equality constraint residual h(x).
        constraint_grad: Jacobian of h. Defaults to ``jax.jacfwd(constraint)``.
        
    Example:
        >>> problem = OptimumProblem(
        ...     num_variables=2,
        ...     num_constraints=1,
        ...     objective=lambda x: x @ x,
        ...     constraint=lambda x: jnp.array([x[0] + x[1] - 1.0]),
        ... )
    """
    num_variables: int
    num_constraints: int
    objective: ObjectiveFunction
    objective_grad: Optional[GradientFunction] = None
    objective_hessian: Optional[HessianFunction] = None
    constraint: Optional[ConstraintFunction] = None
    constraint_grad: Optional[JacobianFunction] = None

    def __post_init__(self) -> None:
        if self.num_variables <= 0:
            raise ValueError("num_variables must be positive")
        if self.num_constraints < 0:
            raise ValueError("num_constraints must be non-negative")
        if self.constraint is None and self.num_constraints > 0:
            raise ValueError("constraint function is required when num_constraints > 0")

        # Fill missing derivatives with autodiff, bypassing the frozen dataclass
        if self.objective_grad is None:
            object.__setattr__(self, "objective_grad", jax.grad(self.objective))
        if self.objective_hessian is None:
            hess = jax.hessian(self.objective)
            object.__setattr__(self, "objective_hessian", lambda x, g: DenseHessian(hess(x)))
        if self.constraint is None:
            n = self.num_variables
            object.__setattr__(self, "constraint", lambda x: jnp.zeros(0))
            object.__setattr__(self, "constraint_grad", lambda x: jnp.zeros((0, n)))
        elif self.constraint_grad is None:
            object.__setattr__(self, "constraint_grad", jax.jacfwd(self.constraint))

    def eval_objective(self, x: jnp.ndarray) -> Tuple[jnp.ndarray, jnp.ndarray]:
        """Evaluate the objective value and gradient at x."""
        f = jnp.asarray(self.objective(x))
        g = jnp.asarray(self.objective_grad(x))
        return f, g

    def eval_hessian(self, x: jnp.ndarray, g: jnp.ndarray) -> Hessian:
        """Evaluate the objective Hessian at x."""
        return as_hessian(self.objective_hessian(x, g))

    def eval_constraint(self, x: jnp.ndarray) -> Tuple[jnp.ndarray, jnp.ndarray]:
        """Evaluate the constraint residual and Jacobian at x."""
        h = jnp.atleast_1d(jnp.asarray(self.constraint(x)))
        A = jnp.atleast_2d(jnp.asarray(self.constraint_grad(x)))
        return h, A


def linear_constraint(A: jnp.ndarray, b: jnp.ndarray) -> Tuple[ConstraintFunction, JacobianFunction]:
    """Build the callbacks of the linear constraint A x = b.
    
    Args:
        A: Constraint matrix (m, n).
        b: Right-hand side (m,).
        
    Returns:
        Tuple of (constraint, constraint_grad) callbacks.
    """
    A = jnp.asarray(A)
    b = jnp.asarray(b)
    return (lambda x: A @ x - b), (lambda x: A)


def make_quadratic_problem(
    Q: jnp.ndarray,
    c: jnp.ndarray,
    A: Optional[jnp.ndarray] = None,
    b: Optional[jnp.ndarray] = None,
) -> OptimumProblem:
    """Build the problem min (1/2) x^T Q x + c^T x subject to A x = b, x >= 0.
    
    Args:
        Q: Quadratic cost matrix (n, n).
        c: Linear cost vector (n,).
        A: Optional equality constraint matrix (m, n).
        b: Optional equality right-hand side (m,).
        
    Returns:
        OptimumProblem with analytic derivatives.
    """
    Q = jnp.asarray(Q)
    c = jnp.asarray(c)
    n = c.shape[0]
    
    if A is None:
        A = jnp.zeros((0, n))
        b = jnp.zeros(0)
    A = jnp.atleast_2d(jnp.asarray(A))
    b = jnp.atleast_1d(jnp.asarray(b))
    constraint, constraint_grad = linear_constraint(A, b)
    
    return OptimumProblem(
        num_variables=n,
        num_constraints=A.shape[0],
        objective=lambda x: 0.5 * x @ Q @ x + c @ x,
        objective_grad=lambda x: Q @ x + c,
        objective_hessian=lambda x, g: DenseHessian(Q),
        constraint=constraint,
        constraint_grad=constraint_grad,
    )

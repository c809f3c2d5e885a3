"""Shared problem fixtures for the optimizer tests."""

import jax.numpy as jnp
import pytest

from optimjax import DiagonalHessian, OptimumProblem, linear_constraint, make_quadratic_problem


def make_water_problem(c0: float = -10.0) -> OptimumProblem:
    """Ideal-mixture Gibbs energy of H2O, H2 and O2 with H and O balances.

    minimize  sum_i x_i (c_i + ln x_i)
    subject to  2 x_H2O + 2 x_H2 = 2,  x_H2O + 2 x_O2 = 1
    """
    c = jnp.array([c0, 0.0, 0.0])
    W = jnp.array([[2.0, 2.0, 0.0], [1.0, 0.0, 2.0]])
    b = jnp.array([2.0, 1.0])
    constraint, constraint_grad = linear_constraint(W, b)
    return OptimumProblem(
        num_variables=3,
        num_constraints=2,
        objective=lambda x: jnp.sum(x * (c + jnp.log(x))),
        objective_grad=lambda x: c + jnp.log(x) + 1.0,
        objective_hessian=lambda x, g: DiagonalHessian(1.0 / x),
        constraint=constraint,
        constraint_grad=constraint_grad,
    )


@pytest.fixture
def simple_qp() -> OptimumProblem:
    """minimize x1^2 + x2^2 subject to x1 + x2 = 1, x >= 0."""
    return make_quadratic_problem(
        Q=2.0 * jnp.eye(2),
        c=jnp.zeros(2),
        A=jnp.array([[1.0, 1.0]]),
        b=jnp.array([1.0]),
    )


@pytest.fixture
def water_problem() -> OptimumProblem:
    return make_water_problem()

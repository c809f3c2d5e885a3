#!/usr/bin/env python3
"""Gibbs energy minimization for a mixture of H2O, H2 and O2.

The dimensionless Gibbs energy is modelled as

    G(n) = sum_i n_i (mu0_i / RT + ln n_i)

and minimized subject to element balances W n = b and n >= 0. Its Hessian
is diag(1/n), so the exact inverse diag(n) is cheap and is supplied to the
solver directly, which lets the KKT solver use the rangespace method. The
solve is then repeated at a slightly different standard chemical potential,
warm started from the first solution.
"""

import jax.numpy as jnp

import optimjax as ox

SPECIES = ["H2O", "H2", "O2"]

# Element balance: rows are H and O
W = jnp.array([
    [2.0, 2.0, 0.0],
    [1.0, 0.0, 2.0],
])


def build_problem(mu0: jnp.ndarray, b: jnp.ndarray) -> ox.OptimumProblem:
    """Gibbs energy problem for the given standard potentials."""

    def gibbs(n):
        return jnp.sum(n * (mu0 + jnp.log(n)))

    def gibbs_grad(n):
        return mu0 + jnp.log(n) + 1.0

    def inverse_hessian(n, g):
        return ox.InverseHessian(jnp.diag(n))

    constraint, constraint_grad = ox.linear_constraint(W, b)
    return ox.OptimumProblem(
        num_variables=len(SPECIES),
        num_constraints=W.shape[0],
        objective=gibbs,
        objective_grad=gibbs_grad,
        objective_hessian=inverse_hessian,
        constraint=constraint,
        constraint_grad=constraint_grad,
    )


def main():
    """Run the equilibrium example."""
    b = jnp.array([2.0, 1.0])  # one mole of water
    options = ox.OptimumOptions(tolerance=1e-10, max_iterations=100)
    solver = ox.IpnewtonSolver()
    
    problem = build_problem(jnp.array([-20.0, 0.0, 0.0]), b)
    state = ox.OptimumState(x=jnp.ones(3))
    result = solver.solve(problem, state, options)
    
    print("Cold start")
    print(f"  succeeded={result.succeeded} iterations={result.iterations} error={result.error:.2e}")
    for name, amount in zip(SPECIES, state.x):
        print(f"  {name:>4}: {float(amount):.6e}")
    
    # Less stable water, warm started from the previous equilibrium
    problem = build_problem(jnp.array([-19.0, 0.0, 0.0]), b)
    warm = solver.solve(problem, state, options)
    
    print("Warm start")
    print(f"  succeeded={warm.succeeded} iterations={warm.iterations} error={warm.error:.2e}")
    for name, amount in zip(SPECIES, state.x):
        print(f"  {name:>4}: {float(amount):.6e}")
    
    total = result + warm
    print(f"Total iterations {total.iterations}, total time {total.time:.4f}s")


if __name__ == "__main__":
    main()

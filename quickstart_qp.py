#!/usr/bin/env python3
"""Quickstart example: a quadratic program with the interior-point Newton solver.

Problem:
    minimize    (1/2) x^T Q x + q^T x
    subject to  A x = b
               x >= 0

Where:
    Q = [[2, 1], [1, 2]]  (positive definite)
    q = [1, 1]
    A = [[1, 1]]          (budget constraint)
    b = [1]

Expected solution: x ≈ [0.5, 0.5], obj ≈ 1.75
"""

import jax.numpy as jnp

import optimjax as ox


def main():
    """Run the quickstart example."""
    print("optimjax Quickstart Example")
    print("=" * 40)
    
    # Problem data
    Q = jnp.array([[2.0, 1.0], [1.0, 2.0]])
    q = jnp.array([1.0, 1.0])
    A = jnp.array([[1.0, 1.0]])
    b = jnp.array([1.0])
    
    problem = ox.make_quadratic_problem(Q, q, A, b)
    print(f"Problem with {problem.num_variables} variables and {problem.num_constraints} constraint")
    
    # Solve from x = (1, 1), printing one row per iteration
    state = ox.OptimumState(x=jnp.array([1.0, 1.0]))
    options = ox.OptimumOptions(
        tolerance=1e-8,
        output=ox.OutputterOptions(active=True, width=12, precision=4),
    )
    result = ox.IpnewtonSolver().solve(problem, state, options)
    print()
    
    print(f"Succeeded: {result.succeeded}")
    print(f"Iterations: {result.iterations}")
    print(f"Final error: {result.error:.2e}")
    print(f"Optimal solution x: {state.x}")
    print(f"Multiplier y: {state.y}")
    print(f"Objective: {state.f:.6f}")
    print(f"Time: {result.time:.4f}s (linear systems {result.time_linear_systems:.4f}s)")
    print()
    
    print("Solution verification:")
    print(f"  Budget constraint: x1 + x2 = {jnp.sum(state.x):.6f} (should be 1.0)")
    print(f"  Non-negativity: x > 0? {bool(jnp.all(state.x > 0))}")


if __name__ == "__main__":
    main()

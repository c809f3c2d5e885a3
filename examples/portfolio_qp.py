#!/usr/bin/env python3
"""Long-only mean-variance portfolio optimization with optimjax.

The portfolio problem:
    maximize    μ^T w - (γ/2) w^T Σ w
    subject to  1^T w = 1              (budget constraint)
                w >= 0                 (long-only)

Where:
- w: portfolio weights
- μ: expected returns
- Σ: covariance matrix
- γ: risk aversion parameter

The problem is solved for a sweep of risk aversions. Each solve is warm
started from the previous optimal portfolio.
"""

from typing import Tuple

import jax
import jax.numpy as jnp

import optimjax as ox


def generate_market_data(n_assets: int = 8, n_periods: int = 252, seed: int = 42) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """Generate synthetic expected returns and covariance.
    
    Args:
        n_assets: Number of assets.
        n_periods: Number of time periods for return history.
        seed: Random seed.
        
    Returns:
        Tuple of (expected_returns, covariance_matrix).
    """
    key1, key2, key3 = jax.random.split(jax.random.PRNGKey(seed), 3)
    
    # Factor structure for realistic correlations
    n_factors = min(3, n_assets // 2)
    loadings = jax.random.normal(key1, (n_assets, n_factors)) * 0.3
    factor_returns = jax.random.normal(key2, (n_periods, n_factors)) * 0.02
    noise = jax.random.normal(key3, (n_periods, n_assets)) * 0.01
    returns = factor_returns @ loadings.T + noise + 0.0004
    
    expected_returns = jnp.mean(returns, axis=0) * 252
    covariance = jnp.cov(returns.T) * 252
    return expected_returns, covariance


def portfolio_problem(mu: jnp.ndarray, sigma: jnp.ndarray, gamma: float) -> ox.OptimumProblem:
    """Mean-variance problem in minimization form."""
    n = mu.shape[0]
    return ox.make_quadratic_problem(gamma * sigma, -mu, jnp.ones((1, n)), jnp.ones(1))


def main():
    """Run the portfolio sweep."""
    print("optimjax Portfolio Optimization")
    print("=" * 40)
    
    mu, sigma = generate_market_data()
    n = mu.shape[0]
    print(f"Assets: {n}")
    print(f"Expected returns: {jnp.round(mu, 3)}")
    print()
    
    solver = ox.IpnewtonSolver()
    options = ox.OptimumOptions(tolerance=1e-9)
    state = ox.OptimumState(x=jnp.full(n, 1.0 / n))
    
    print(f"{'gamma':>8} {'iters':>6} {'return':>10} {'risk':>10} {'active':>7}")
    print("-" * 45)
    for gamma in (1.0, 2.0, 5.0, 10.0, 20.0):
        result = solver.solve(portfolio_problem(mu, sigma, gamma), state, options)
        w = state.x
        expected = float(mu @ w)
        risk = float(jnp.sqrt(w @ sigma @ w))
        active = int(jnp.sum(w < 1e-6))
        status = "" if result.succeeded else " (not converged)"
        print(f"{gamma:8.1f} {result.iterations:6d} {expected:10.4f} {risk:10.4f} {active:7d}{status}")
    
    print()
    print(f"Final weights: {jnp.round(state.x, 4)}")
    print(f"Budget: {float(jnp.sum(state.x)):.6f}")


if __name__ == "__main__":
    main()

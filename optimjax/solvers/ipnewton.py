"""Interior-point Newton method for nonlinear equality and bound constrained problems.

Solves

    minimize    f(x)
    subject to  h(x) = 0
                x >= 0

by applying Newton's method to the perturbed optimality conditions

    g - A^T y - z = 0
    h = 0
    x * z = mu

with a fixed barrier parameter mu. The bound multipliers z are eliminated
from the Newton system, which is handed to the KKT solver, and recovered
afterwards from dx. Steps are cut back with the fraction to the boundary
rule so that x and z stay strictly positive.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import jax.numpy as jnp

from optimjax.kkt import KktSolver
from optimjax.options import OptimumOptions
from optimjax.outputter import Outputter
from optimjax.problem import OptimumProblem
from optimjax.result import OptimumResult
from optimjax.state import OptimumState
from optimjax.utils.checking import check_evaluation_shapes
from optimjax.utils.steps import fraction_to_the_boundary, norm_inf
from optimjax.utils.timing import elapsed, now

logger = logging.getLogger(__name__)


def _sized_or_zeros(v, size: int) -> jnp.ndarray:
    """Return v as a float vector, or zeros when it does not have the given size."""
    v = jnp.asarray(v, dtype=float)
    if v.shape != (size,):
        return jnp.zeros(size)
    return v


def estimate_convergence_rate(errors: List[float]) -> float:
    """Estimate the order of convergence from the last three errors.

    Uses q = log(e_k / e_{k-1}) / log(e_{k-1} / e_{k-2}). Returns zero when
    fewer than three positive errors are available or the estimate is undefined.
    """
    if len(errors) < 3:
        return 0.0
    e0, e1, e2 = errors[-3:]
    if min(e0, e1, e2) <= 0.0 or e0 == e1:
        return 0.0
    return math.log(e2 / e1) / math.log(e1 / e0)


class _IpnewtonWorkspace:
    """Working data of a single solve: scratch vectors, step lengths and errors."""

    def __init__(
        self,
        problem: OptimumProblem,
        state: OptimumState,
        options: OptimumOptions,
        kkt: KktSolver,
        outputter: Outputter,
    ) -> None:
        self.problem = problem
        self.state = state
        self.options = options
        self.kkt = kkt
        self.outputter = outputter
        self.result = OptimumResult()

        self.n = problem.num_variables
        self.m = problem.num_constraints
        self.mu = options.ipnewton.mu

        self.dx = jnp.zeros(self.n)
        self.dy = jnp.zeros(self.m)
        self.dz = jnp.zeros(self.n)
        self.a = jnp.zeros(self.n)
        self.b = jnp.zeros(self.m)

        self.alpha = self.alphax = self.alphaz = 1.0
        self.errorf = self.errorh = self.errorc = self.error = math.inf
        self.errors: List[float] = []

    def initialize(self) -> None:
        """Size the iterate and move it strictly inside the feasible domain."""
        state, n, m, mu = self.state, self.n, self.m, self.mu
        mux = self.options.ipnewton.mux

        state.x = _sized_or_zeros(state.x, n)
        state.y = _sized_or_zeros(state.y, m)
        state.z = _sized_or_zeros(state.z, n)

        state.x = jnp.maximum(state.x, mux * mu)
        state.z = jnp.where(state.z > 0.0, state.z, mu / state.x)

    def evaluate_state(self) -> None:
        """Evaluate objective, gradient, constraint and Jacobian at the current x."""
        state, result, problem = self.state, self.result, self.problem

        begin = now()
        f, g = problem.eval_objective(state.x)
        g.block_until_ready()
        result.time_objective_evals += elapsed(begin)
        result.num_objective_evals += 1

        begin = now()
        h, A = problem.eval_constraint(state.x)
        A.block_until_ready()
        result.time_constraint_evals += elapsed(begin)
        result.num_constraint_evals += 1

        state.f = float(f)
        state.g = g
        state.h = h
        state.A = A

    def compute_step(self) -> None:
        """Compute the Newton step (dx, dy, dz) for the current iterate."""
        state, result, mu = self.state, self.result, self.mu
        x, y, z, g, h, A = state.x, state.y, state.z, state.g, state.h, state.A

        # Pre-decompose the KKT equation for the current Hessian representation
        begin = now()
        state.H = self.problem.eval_hessian(x, g)
        result.time_objective_evals += elapsed(begin)
        self.kkt.decompose(state)

        self.a = -(g - A.T @ y - mu / x)
        self.b = -h

        self.dx, self.dy = self.kkt.solve(self.a, self.b)
        self.dz = (mu - z * self.dx) / x - z

        result.time_linear_systems += self.kkt.info.time_decompose
        result.time_linear_systems += self.kkt.info.time_solve

    def apply_step(self) -> None:
        """Update x, y, z with boundary-respecting step lengths."""
        state = self.state
        tau = self.options.ipnewton.tau

        self.alphax = float(fraction_to_the_boundary(state.x, self.dx, tau))
        self.alphaz = float(fraction_to_the_boundary(state.z, self.dz, tau))
        self.alpha = min(self.alphax, self.alphaz)

        if self.options.ipnewton.uniform_newton_step:
            state.x = state.x + self.alpha * self.dx
            state.y = state.y + self.alpha * self.dy
            state.z = state.z + self.alpha * self.dz
        else:
            state.x = state.x + self.alpha * self.dx
            state.y = state.y + self.dy
            state.z = state.z + self.alphaz * self.dz

    def update_errors(self) -> None:
        """Compute the optimality, feasibility and centrality errors."""
        state = self.state
        self.errorf = norm_inf(state.g - state.A.T @ state.y - state.z)
        self.errorh = norm_inf(state.h)
        self.errorc = norm_inf(state.x * state.z - self.mu)
        self.error = max(self.errorf, self.errorh, self.errorc)
        self.result.error = self.error
        self.errors.append(self.error)

    def report_header(self) -> None:
        """Declare the progress columns and emit the initial row."""
        if not self.options.output.active:
            return
        out, state = self.outputter, self.state
        out.set_options(self.options.output)

        out.add_entry("iter")
        out.add_entries("x", self.n)
        out.add_entries("y", self.m)
        out.add_entries("z", self.n)
        for name in ("f(x)", "h(x)", "errorf", "errorh", "errorc", "error", "alpha", "alphax", "alphaz"):
            out.add_entry(name)
        out.output_header()

        out.add_value(self.result.iterations)
        out.add_values(state.x)
        out.add_values(state.y)
        out.add_values(state.z)
        out.add_value(state.f)
        out.add_value(norm_inf(state.h))
        for _ in range(7):
            out.add_value("---")
        out.output_state()

    def report_progress(self) -> None:
        """Emit one progress row for the current iteration."""
        if not self.options.output.active:
            return
        out, state = self.outputter, self.state
        out.add_value(self.result.iterations)
        out.add_values(state.x)
        out.add_values(state.y)
        out.add_values(state.z)
        out.add_value(state.f)
        out.add_value(norm_inf(state.h))
        for value in (self.errorf, self.errorh, self.errorc, self.error, self.alpha, self.alphax, self.alphaz):
            out.add_value(value)
        out.output_state()

    def converging(self) -> bool:
        return self.error > self.options.tolerance and self.result.iterations < self.options.max_iterations


class IpnewtonSolver:
    """Interior-point Newton solver.

    Each instance owns its KKT solver and progress outputter, so separate
    instances can be used concurrently on separate problems and states.
    Copies are deep: a copied solver shares nothing with the original.
    Both components are configured from the options passed to each
    ``solve`` call, so a solver carries no settings between solves.

    Example:
        >>> solver = IpnewtonSolver()
        >>> state = OptimumState(x=jnp.array([1.0, 1.0]))
        >>> result = solver.solve(problem, state, OptimumOptions(tolerance=1e-8))
        >>> result.succeeded, state.x
    """

    def __init__(self) -> None:
        self.kkt = KktSolver()
        self.outputter = Outputter()

    def copy(self) -> IpnewtonSolver:
        """Independent solver with its own KKT solver and outputter.

        Factorizations are not carried over since they are only valid within
        the iteration that computed them.
        """
        return IpnewtonSolver()

    def __copy__(self) -> IpnewtonSolver:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> IpnewtonSolver:
        return self.copy()

    def solve(
        self,
        problem: OptimumProblem,
        state: OptimumState,
        options: Optional[OptimumOptions] = None,
    ) -> OptimumResult:
        """Solve the problem, updating ``state`` in place.

        Args:
            problem: Problem callbacks.
            state: Initial guess, mutated into the final iterate.
            options: Solver options. Defaults to ``OptimumOptions()``.

        Returns:
            OptimumResult with convergence diagnostics and timing.

        Raises:
            DimensionError: If the callbacks return arrays of the wrong shape.
            KktError: If a KKT system cannot be solved.
        """
        begin = now()
        options = options or OptimumOptions()
        self.kkt.set_options(options.kkt)

        work = _IpnewtonWorkspace(problem, state, options, self.kkt, self.outputter)
        result = work.result

        work.initialize()
        work.evaluate_state()
        check_evaluation_shapes(work.n, work.m, state.g, state.h, state.A)
        work.report_header()

        while True:
            result.iterations += 1
            work.compute_step()
            work.apply_step()
            work.evaluate_state()
            work.update_errors()
            work.report_progress()
            if not work.converging():
                break

        if options.output.active:
            self.outputter.output_header()

        result.succeeded = result.iterations < options.max_iterations
        result.convergence_rate = estimate_convergence_rate(work.errors)
        result.time = elapsed(begin)

        if result.succeeded:
            logger.debug(
                "Interior-point Newton converged in %d iterations (error %.3e, %.3fs)",
                result.iterations, result.error, result.time,
            )
        else:
            logger.warning(
                "Interior-point Newton stopped after %d iterations with error %.3e",
                result.iterations, result.error,
            )
        return result


def solve_ipnewton(
    problem: OptimumProblem,
    state: Optional[OptimumState] = None,
    options: Optional[OptimumOptions] = None,
) -> Tuple[OptimumState, OptimumResult]:
    """Solve a problem with a fresh interior-point Newton solver.

    Args:
        problem: Problem callbacks.
        state: Optional initial guess; a cold start is used when omitted.
        options: Solver options.

    Returns:
        Tuple of (final state, result).
    """
    state = state if state is not None else OptimumState()
    result = IpnewtonSolver().solve(problem, state, options)
    return state, result

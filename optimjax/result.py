"""Outcome record of an optimization solve."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class OptimumResult:
    """Convergence diagnostics and timing of a solve.
    
    Results of chained or restarted solves are combined with ``+=``: the
    success flag, error and convergence rate take the latter's values while
    counts and times are summed.
    
    Args:
        succeeded: Whether the solve converged before hitting the iteration cap.
        iterations: Number of Newton iterations performed.
        num_objective_evals: Number of objective evaluations.
        num_constraint_evals: Number of constraint evaluations.
        convergence_rate: Estimated order of convergence near the solution.
        error: Final value of the convergence error.
        time: Wall clock time of the whole solve (seconds).
        time_objective_evals: Time spent evaluating the objective.
        time_constraint_evals: Time spent evaluating the constraints.
        time_linear_systems: Time spent decomposing and solving KKT systems.
    """
    succeeded: bool = False
    iterations: int = 0
    num_objective_evals: int = 0
    num_constraint_evals: int = 0
    convergence_rate: float = 0.0
    error: float = float("inf")
    time: float = 0.0
    time_objective_evals: float = 0.0
    time_constraint_evals: float = 0.0
    time_linear_systems: float = 0.0

    def __iadd__(self, other: OptimumResult) -> OptimumResult:
        self.succeeded = other.succeeded
        self.iterations += other.iterations
        self.num_objective_evals += other.num_objective_evals
        self.num_constraint_evals += other.num_constraint_evals
        self.convergence_rate = other.convergence_rate
        self.error = other.error
        self.time += other.time
        self.time_objective_evals += other.time_objective_evals
        self.time_constraint_evals += other.time_constraint_evals
        self.time_linear_systems += other.time_linear_systems
        return self

    def __add__(self, other: OptimumResult) -> OptimumResult:
        merged = OptimumResult(**vars(self))
        merged += other
        return merged

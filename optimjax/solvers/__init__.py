"""Solver modules for optimization problems."""

from optimjax.solvers import ipnewton

__all__ = ["ipnewton"]

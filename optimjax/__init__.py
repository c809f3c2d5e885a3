"""optimjax: JAX-native interior-point Newton optimizer for equilibrium problems."""

import jax

# Tolerances near 1e-8 need double precision
jax.config.update("jax_enable_x64", True)

from optimjax.exceptions import DimensionError, ErrorCode, KktError, OptimjaxError
from optimjax.hessian import (
    DenseHessian,
    DiagonalHessian,
    Hessian,
    InverseHessian,
    as_hessian,
    hessian_dot,
    to_dense,
)
from optimjax.kkt import KktInfo, KktSolver
from optimjax.options import (
    IpnewtonOptions,
    KktMethod,
    KktOptions,
    OptimumOptions,
    OutputterOptions,
)
from optimjax.outputter import Outputter
from optimjax.problem import OptimumProblem, linear_constraint, make_quadratic_problem
from optimjax.result import OptimumResult
from optimjax.solvers.ipnewton import IpnewtonSolver, solve_ipnewton
from optimjax.state import OptimumState
from optimjax.utils.steps import fraction_to_the_boundary

__version__ = "0.1.0"

__all__ = [
    "DenseHessian",
    "DiagonalHessian",
    "DimensionError",
    "ErrorCode",
    "Hessian",
    "InverseHessian",
    "IpnewtonOptions",
    "IpnewtonSolver",
    "KktError",
    "KktInfo",
    "KktMethod",
    "KktOptions",
    "KktSolver",
    "OptimjaxError",
    "OptimumOptions",
    "OptimumProblem",
    "OptimumResult",
    "OptimumState",
    "Outputter",
    "OutputterOptions",
    "as_hessian",
    "fraction_to_the_boundary",
    "hessian_dot",
    "linear_constraint",
    "make_quadratic_problem",
    "solve_ipnewton",
    "to_dense",
]

"""Configuration records for the optimizer."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, TextIO


class KktMethod(enum.Enum):
    """Strategy used by the KKT solver to factorize the Newton system."""
    AUTOMATIC = "automatic"
    PARTIAL_PIV_LU = "partial_piv_lu"
    RANGESPACE = "rangespace"
    ITERATIVE = "iterative"


@dataclass(frozen=True)
class OutputterOptions:
    """Formatting of the tabular progress output.
    
    Args:
        active: Whether progress rows are emitted at all.
        fixed: Use fixed-point instead of scientific notation.
        precision: Number of digits after the decimal point.
        width: Minimum column width.
        separator: String placed between columns.
        stream: Where rows are written, stdout when None.
    """
    active: bool = False
    fixed: bool = False
    precision: int = 6
    width: int = 15
    separator: str = "|"
    stream: Optional[TextIO] = None

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError("precision must be non-negative")
        if self.width <= 0:
            raise ValueError("width must be positive")


@dataclass(frozen=True)
class IpnewtonOptions:
    """Parameters of the interior-point Newton iteration.

    Args:
        mu: Barrier parameter, the target of the complementarity products x * z.
        mux: Fraction of mu used as the lower floor of the initial x.
        tau: Fraction to the boundary safety factor in (0, 1).
        uniform_newton_step: Apply one step length to x, y and z instead of
            moving y by the full step and z by its own step length.
    """
    mu: float = 1.0e-8
    mux: float = 1.0e-8
    tau: float = 0.99999
    uniform_newton_step: bool = False

    def __post_init__(self) -> None:
        """Validate option values after initialization."""
        if self.mu <= 0:
            raise ValueError("mu must be positive")
        if self.mux <= 0:
            raise ValueError("mux must be positive")
        if not 0.0 < self.tau < 1.0:
            raise ValueError("tau must lie in the open interval (0, 1)")


@dataclass(frozen=True)
class KktOptions:
    """Parameters of the KKT linear solver.

    Args:
        method: Factorization strategy. AUTOMATIC picks one from the Hessian
            representation.
        regularization: Ridge added to the Hessian block of the KKT matrix.
        iterative_tol: Relative residual tolerance of the GMRES method.
        iterative_maxiter: GMRES iteration limit, jaxopt's default when None.
    """
    method: KktMethod = KktMethod.AUTOMATIC
    regularization: float = 0.0
    iterative_tol: float = 1.0e-10
    iterative_maxiter: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate option values after initialization."""
        if self.regularization < 0:
            raise ValueError("regularization must be non-negative")
        if self.iterative_tol <= 0:
            raise ValueError("iterative_tol must be positive")
        if self.iterative_maxiter is not None and self.iterative_maxiter <= 0:
            raise ValueError("iterative_maxiter must be positive")


@dataclass(frozen=True)
class OptimumOptions:
    """Options for an optimization solve.
    
    Args:
        tolerance: Convergence tolerance on the largest of the optimality,
            feasibility and centrality errors.
        max_iterations: Maximum number of Newton iterations.
        output: Progress output configuration.
        ipnewton: Interior-point Newton parameters.
        kkt: KKT linear solver parameters.
    """
    tolerance: float = 1.0e-6
    max_iterations: int = 200
    output: OutputterOptions = field(default_factory=OutputterOptions)
    ipnewton: IpnewtonOptions = field(default_factory=IpnewtonOptions)
    kkt: KktOptions = field(default_factory=KktOptions)

    def __post_init__(self) -> None:
        """Validate option values after initialization."""
        if self.tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")

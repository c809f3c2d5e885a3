"""Solver for the KKT equations of the interior-point Newton method.

Each Newton iteration solves the linearized optimality conditions

    [ H + D   -A^T ] [dx]   [a]
    [ A        0   ] [dy] = [b]

where D = diag(z / x) comes from the logarithmic barrier. The work is split
into ``decompose``, which factorizes the matrix for the current iterate, and
``solve``, which back-substitutes right-hand sides against that factorization.
The factorization strategy depends on the Hessian representation:

    DenseHessian      LU with partial pivoting of the full (n + m) matrix
    DiagonalHessian   rangespace method with the m x m Schur complement
    InverseHessian    rangespace method using the supplied inverse
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import jax
import jax.numpy as jnp
from jax.scipy.linalg import lu_factor, lu_solve
from jaxopt import linear_solve

from optimjax.exceptions import DimensionError, ErrorCode, KktError
from optimjax.hessian import DenseHessian, DiagonalHessian, Hessian, InverseHessian, hessian_dot, to_dense
from optimjax.options import KktMethod, KktOptions
from optimjax.state import OptimumState
from optimjax.utils.checking import check_hessian_shape, check_matrix_shape, check_vector_shape
from optimjax.utils.timing import elapsed, now

logger = logging.getLogger(__name__)


@dataclass
class KktInfo:
    """Timing and method of the most recent decompose/solve calls.

    Args:
        method: Method used by the last decomposition.
        time_decompose: Seconds spent in the last ``decompose`` call.
        time_solve: Seconds spent in the last ``solve`` call.
    """
    method: Optional[KktMethod] = None
    time_decompose: float = 0.0
    time_solve: float = 0.0


@jax.jit
def _assemble_kkt_matrix(H: jnp.ndarray, d: jnp.ndarray, A: jnp.ndarray) -> jnp.ndarray:
    """Assemble the full (n + m) KKT matrix."""
    m = A.shape[0]
    return jnp.block([
        [H + jnp.diag(d), -A.T],
        [A, jnp.zeros((m, m), dtype=H.dtype)],
    ])


@jax.jit
def _schur_diagonal(A: jnp.ndarray, dinv: jnp.ndarray) -> jnp.ndarray:
    """Schur complement A diag(dinv) A^T."""
    return (A * dinv) @ A.T


@jax.jit
def _augmented_inverse(Hinv: jnp.ndarray, d: jnp.ndarray) -> jnp.ndarray:
    """Inverse of H + diag(d) given the inverse of H.

    Uses (H + D)^-1 = (I + H^-1 D)^-1 H^-1.
    """
    n = Hinv.shape[0]
    return jnp.linalg.solve(jnp.eye(n, dtype=Hinv.dtype) + Hinv * d, Hinv)


def _check_lu(lu: jnp.ndarray, what: str) -> None:
    """Raise KktError when an LU factorization has zero or non-finite pivots."""
    if not bool(jnp.all(jnp.isfinite(lu))):
        raise KktError(f"Non-finite entries in the LU factors of the {what}")
    if lu.shape[0] > 0 and bool(jnp.any(jnp.diag(lu) == 0.0)):
        raise KktError(f"Zero pivot in the LU factorization of the {what}")


def _check_finite(what: str, *arrays: jnp.ndarray) -> None:
    for array in arrays:
        if not bool(jnp.all(jnp.isfinite(array))):
            raise KktError(f"Non-finite {what}", ErrorCode.NON_FINITE_KKT_SOLUTION)


class KktSolver:
    """Decompose/solve split for the KKT equations.

    A decomposition is only valid for the iterate it was computed from; it
    may be reused for several right-hand sides within one iteration.

    Args:
        options: KKT solver options.

    Example:
        >>> kkt = KktSolver()
        >>> kkt.decompose(state)
        >>> dx, dy = kkt.solve(a, b)
    """

    def __init__(self, options: Optional[KktOptions] = None) -> None:
        self.options = options or KktOptions()
        self.info = KktInfo()
        self._method: Optional[KktMethod] = None
        self._A: Optional[jnp.ndarray] = None
        self._H: Optional[Hessian] = None
        self._d: Optional[jnp.ndarray] = None
        self._lu = None
        self._lu_schur = None
        self._inverse_kind: Optional[str] = None
        self._inverse_data = None

    def set_options(self, options: KktOptions) -> None:
        """Replace the options; takes effect at the next ``decompose``."""
        self.options = options

    def decompose(self, state: OptimumState) -> None:
        """Factorize the KKT matrix for the current x, z, H and A.

        Raises:
            DimensionError: If H, A, x and z have inconsistent shapes.
            KktError: If the matrix cannot be factorized.
        """
        begin = now()

        if state.H is None:
            raise ValueError("state.H must be evaluated before decomposing the KKT matrix")

        x, z, A, H = state.x, state.z, state.A, state.H
        n = x.shape[0]
        check_vector_shape("z", z, n)
        check_hessian_shape(H, n)
        if A.ndim != 2:
            raise DimensionError(f"Constraint Jacobian must be 2-D, got shape {A.shape}")
        check_matrix_shape("constraint Jacobian", A, (A.shape[0], n))

        method = self._resolve_method(H)
        logger.debug("KKT decompose with method %s for %s", method.value, type(H).__name__)

        self._A = A
        self._H = H
        self._d = z / x + self.options.regularization
        self._lu = None
        self._lu_schur = None
        self._method = None

        if method is KktMethod.PARTIAL_PIV_LU:
            self._decompose_lu()
        elif method is KktMethod.RANGESPACE:
            self._decompose_rangespace()

        self._method = method
        self.info.method = method
        self.info.time_decompose = elapsed(begin)

    def solve(self, a: jnp.ndarray, b: jnp.ndarray) -> Tuple[jnp.ndarray, jnp.ndarray]:
        """Solve the decomposed KKT equations for the right-hand sides a and b.

        Args:
            a: Dual residual right-hand side (n,).
            b: Primal residual right-hand side (m,).

        Returns:
            Tuple (dx, dy) of shapes (n,) and (m,).

        Raises:
            KktError: If called before ``decompose`` or if the solution is not finite.
        """
        begin = now()

        if self._method is None:
            raise KktError("solve called before a successful decompose", ErrorCode.NOT_DECOMPOSED)

        n = self._d.shape[0]
        m = self._A.shape[0]
        check_vector_shape("a", a, n)
        check_vector_shape("b", b, m)

        if self._method is KktMethod.PARTIAL_PIV_LU:
            dx, dy = self._solve_lu(a, b)
        elif self._method is KktMethod.RANGESPACE:
            dx, dy = self._solve_rangespace(a, b)
        else:
            dx, dy = self._solve_iterative(a, b)

        dx = dx.block_until_ready()
        dy = dy.block_until_ready()
        _check_finite("KKT solution", dx, dy)

        self.info.time_solve = elapsed(begin)
        return dx, dy

    def _resolve_method(self, H: Hessian) -> KktMethod:
        method = self.options.method
        if method is not KktMethod.AUTOMATIC:
            return method
        if isinstance(H, DenseHessian):
            return KktMethod.PARTIAL_PIV_LU
        return KktMethod.RANGESPACE

    # ------------------------------------------------------------------
    # LU of the full matrix
    # ------------------------------------------------------------------

    def _decompose_lu(self) -> None:
        kkt_matrix = _assemble_kkt_matrix(to_dense(self._H), self._d, self._A)
        lu, piv = lu_factor(kkt_matrix)
        lu.block_until_ready()
        _check_lu(lu, "KKT matrix")
        self._lu = (lu, piv)

    def _solve_lu(self, a: jnp.ndarray, b: jnp.ndarray) -> Tuple[jnp.ndarray, jnp.ndarray]:
        n = a.shape[0]
        solution = lu_solve(self._lu, jnp.concatenate([a, b]))
        return solution[:n], solution[n:]

    # ------------------------------------------------------------------
    # Rangespace (Schur complement) method
    # ------------------------------------------------------------------

    def _decompose_rangespace(self) -> None:
        H, d, A = self._H, self._d, self._A

        if isinstance(H, DiagonalHessian):
            diagonal = H.diagonal + d
            if not bool(jnp.all(diagonal > 0.0)):
                raise KktError(
                    "Rangespace method requires a positive diagonal H + Z/X",
                    ErrorCode.NON_POSITIVE_DIAGONAL,
                )
            self._inverse_kind = "diagonal"
            self._inverse_data = 1.0 / diagonal
        elif isinstance(H, InverseHessian):
            inverse = _augmented_inverse(H.inverse, d)
            _check_finite("inverse of the Hessian block", inverse)
            self._inverse_kind = "matrix"
            self._inverse_data = inverse
        else:
            lu, piv = lu_factor(H.matrix + jnp.diag(d))
            _check_lu(lu, "Hessian block")
            self._inverse_kind = "lu"
            self._inverse_data = (lu, piv)

        if A.shape[0] == 0:
            return

        if self._inverse_kind == "diagonal":
            schur = _schur_diagonal(A, self._inverse_data)
        else:
            schur = A @ self._apply_inverse(A.T)

        lu, piv = lu_factor(schur)
        lu.block_until_ready()
        _check_lu(lu, "Schur complement")
        self._lu_schur = (lu, piv)

    def _apply_inverse(self, v: jnp.ndarray) -> jnp.ndarray:
        """Apply (H + D)^-1 to a vector or to the columns of a matrix."""
        if self._inverse_kind == "diagonal":
            dinv = self._inverse_data
            return dinv * v if v.ndim == 1 else dinv[:, None] * v
        if self._inverse_kind == "matrix":
            return self._inverse_data @ v
        return lu_solve(self._inverse_data, v)

    def _solve_rangespace(self, a: jnp.ndarray, b: jnp.ndarray) -> Tuple[jnp.ndarray, jnp.ndarray]:
        A = self._A
        if A.shape[0] == 0:
            return self._apply_inverse(a), jnp.zeros(0, dtype=a.dtype)

        w = self._apply_inverse(a)
        dy = lu_solve(self._lu_schur, b - A @ w)
        dx = self._apply_inverse(a + A.T @ dy)
        return dx, dy

    # ------------------------------------------------------------------
    # Matrix-free GMRES
    # ------------------------------------------------------------------

    def _solve_iterative(self, a: jnp.ndarray, b: jnp.ndarray) -> Tuple[jnp.ndarray, jnp.ndarray]:
        H, d, A = self._H, self._d, self._A
        n = a.shape[0]

        def matvec(u: jnp.ndarray) -> jnp.ndarray:
            dx, dy = u[:n], u[n:]
            top = hessian_dot(H, dx) + d * dx - A.T @ dy
            return jnp.concatenate([top, A @ dx])

        rhs = jnp.concatenate([a, b])
        solution = linear_solve.solve_gmres(
            matvec,
            rhs,
            tol=self.options.iterative_tol,
            atol=0.0,
            restart=rhs.shape[0],
            maxiter=self.options.iterative_maxiter,
        )
        return solution[:n], solution[n:]

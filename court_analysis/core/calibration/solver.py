"""
Dense linear solver used by the homography estimator.

Gaussian elimination with partial pivoting. Rows are swapped to bring the
largest-magnitude entry of each pivot column onto the diagonal; columns are
never reordered, so the solution comes back in input column order.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveResult:
    """Solution vector plus the columns whose pivots were too small to trust."""
    x: np.ndarray
    deficient_columns: Tuple[int, ...] = ()

    @property
    def is_rank_deficient(self) -> bool:
        return len(self.deficient_columns) > 0


def normal_equations(A: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Return (AᵗA, Aᵗb) for a least-squares solve of an overdetermined system."""
    A = np.asarray(A, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return A.T @ A, A.T @ b


class LinearSolver:
    """Solve ``A·x = b`` by elimination with partial pivoting.

    A pivot whose magnitude falls below the tolerance marks its variable as
    underdetermined: elimination skips that column and back-substitution
    leaves the variable at 0. The caller decides whether that is acceptable.
    """

    def __init__(self, pivot_tolerance: float = 1e-10):
        self.pivot_tolerance = pivot_tolerance

    def solve(self, A: np.ndarray, b: np.ndarray) -> SolveResult:
        A = np.asarray(A, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)

        if A.ndim != 2:
            raise ValueError(f"Coefficient matrix must be 2-D, got {A.ndim}-D")
        n, m = A.shape
        if b.shape != (n,):
            raise ValueError(f"Right-hand side must have length {n}, got shape {b.shape}")
        if n < m:
            raise ValueError(f"System is underdetermined: {n} rows for {m} unknowns")

        # Scale-aware threshold: entries of a normal-equation system grow with
        # the square of the input coordinates.
        scale = max(1.0, float(np.max(np.abs(A))) if A.size else 1.0)
        tolerance = self.pivot_tolerance * scale

        aug = np.hstack([A, b.reshape(-1, 1)])

        # Forward elimination
        for col in range(m):
            pivot_row = col + int(np.argmax(np.abs(aug[col:, col])))
            if pivot_row != col:
                aug[[col, pivot_row]] = aug[[pivot_row, col]]

            pivot = aug[col, col]
            if abs(pivot) < tolerance:
                continue

            factors = aug[col + 1:, col] / pivot
            aug[col + 1:, col:] -= np.outer(factors, aug[col, col:])

        # Back substitution
        x = np.zeros(m, dtype=np.float64)
        deficient = []
        for i in range(m - 1, -1, -1):
            pivot = aug[i, i]
            if abs(pivot) < tolerance:
                deficient.append(i)
                continue
            x[i] = (aug[i, m] - aug[i, i + 1:m] @ x[i + 1:]) / pivot

        if deficient:
            logger.debug(f"Near-zero pivots in columns {sorted(deficient)} "
                         f"(tolerance {tolerance:.3e})")

        return SolveResult(x=x, deficient_columns=tuple(sorted(deficient)))

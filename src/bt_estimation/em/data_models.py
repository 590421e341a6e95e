from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, computed_field
from scipy import sparse

from bt_estimation.core.sparse import SparsePattern
from bt_estimation.em.enums import ConvergenceStatus, InitializationMethod


@dataclass(frozen=True)
class ComparisonData:
    """
    Working structures built once per estimation call.

    Attributes:
        wins: Comparison counts W with the diagonal removed, shape (K, K).
        pattern: Fixed sparsity pattern of N = W + W^T.
        pair_counts: Values of N on `pattern` (nij), shape (nnz,).
        numerator: rowSum(W) + a - 1, shape (K,).
    """

    wins: sparse.csc_matrix
    pattern: SparsePattern
    pair_counts: NDArray[np.float64]
    numerator: NDArray[np.float64]

    @property
    def n_items(self) -> int:
        """Number of items being ranked."""
        return int(self.wins.shape[0])


@dataclass
class EStepResult:
    """
    Results from the E-step of EM algorithm.

    Attributes:
        values: nij / (pi_i + pi_j) on the fixed pattern, shape (nnz,).
        expected: N rebuilt from `values`, shape (K, K).
    """

    values: NDArray[np.float64]
    expected: sparse.csr_matrix


class BTEstimationResult(BaseModel):
    """
    Result of Bradley-Terry EM estimation.

    Attributes:
        pi: Normalized strengths, one per item, summing to 1.
        iters: Number of EM rounds executed.
        convergence_status: Status indicating how estimation terminated;
            `converged` is derived from it.
        max_residual: Largest residual at the last convergence check
            (nan when no round ran).
        initialization: Starting value strategy actually used.
        model_version: Version string for reproducibility tracking.
    """

    model_config = ConfigDict(frozen=True)

    pi: tuple[float, ...]
    iters: int
    convergence_status: ConvergenceStatus
    max_residual: float
    initialization: InitializationMethod
    model_version: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def converged(self) -> bool:
        """Whether every item met the tolerance."""
        return self.convergence_status == ConvergenceStatus.CONVERGED

    @property
    def n_items(self) -> int:
        """Number of items in the model."""
        return len(self.pi)

    def pi_array(self) -> NDArray[np.float64]:
        """Strengths as a numpy array."""
        return np.array(self.pi, dtype=np.float64)

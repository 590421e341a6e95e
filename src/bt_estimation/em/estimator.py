"""
Bradley-Terry estimator using an EM fixed-point iteration.

Fits strengths pi from sparse pairwise comparison counts W under priors
(a, b):
    E-step: n_ij / (pi_i + pi_j) on every observed pair
    M-step: pi_i = (wins_i + a - 1) / (sum_j n_ij / (pi_i + pi_j) + b)
"""

import logging

import numpy as np
from numpy.typing import NDArray

from bt_estimation.core.errors import InvalidArgumentError, NumericalFailureError
from bt_estimation.core.sparse import CSCMatrix
from bt_estimation.core.utils import normalize
from bt_estimation.em.config import (
    DEFAULT_EPSILON,
    DEFAULT_MAX_ITERATIONS,
    ConvergenceConfig,
    EstimationConfig,
)
from bt_estimation.em.data_models import (
    BTEstimationResult,
    ComparisonData,
    EStepResult,
)
from bt_estimation.em.enums import ConvergenceStatus
from bt_estimation.em.ingestion import ingest_comparisons, row_sums
from bt_estimation.em.starting_values import compute_starting_values

logger = logging.getLogger(__name__)


def _validate_priors(a: float, b: float) -> None:
    if not np.isfinite(a):
        raise InvalidArgumentError(f"a must be finite, got {a}")
    if not np.isfinite(b) or b < 0:
        raise InvalidArgumentError(f"b must be finite and >= 0, got {b}")


class BradleyTerryEMEstimator:
    """
    Bradley-Terry strength estimator using EM.

    The model:
        P(i beats j) = pi_i / (pi_i + pi_j)

    with a Gamma(a, b)-style prior on each pi_i. Convergence requires every
    item's implied row sum to be within epsilon of its numerator.
    """

    def __init__(self, config: EstimationConfig | None = None):
        """Initialize estimator."""
        self.config = config or EstimationConfig()

    def _e_step(
        self,
        data: ComparisonData,
        pi: NDArray[np.float64],
    ) -> EStepResult:
        """
        E-step: expected assignment of each pair's comparisons.

        Args:
            data: Working structures for this call.
            pi: Current strengths, shape (K,).

        Returns:
            EStepResult with the new values on the fixed N pattern.

        Raises:
            NumericalFailureError: If some observed pair has a non-positive
                or non-finite strength sum.
        """
        pattern = data.pattern
        strength_sums = pi[pattern.rows] + pi[pattern.cols]

        valid = np.isfinite(strength_sums) & (strength_sums > 0)
        if not np.all(valid):
            bad = int(np.argmin(valid))
            raise NumericalFailureError(
                f"Strength sum for pair ({pattern.rows[bad]}, "
                f"{pattern.cols[bad]}) is {strength_sums[bad]}"
            )

        values = data.pair_counts / strength_sums
        return EStepResult(values=values, expected=pattern.build(values))

    def _compute_residuals(
        self,
        data: ComparisonData,
        e_result: EStepResult,
        pi: NDArray[np.float64],
        b: float,
    ) -> NDArray[np.float64]:
        """
        Distance of each item from the EM fixed point.

        rowsums_k = sum_j N_kj * pi_k + b * pi_k, compared to numer_k.
        """
        rowsums = data.pattern.row_sums(e_result.values) * pi
        rowsums += b * pi
        residuals: NDArray[np.float64] = np.abs(data.numerator - rowsums)
        return residuals

    def _check_convergence(self, residuals: NDArray[np.float64]) -> bool:
        """Converged only if every item is within epsilon."""
        return bool(np.all(residuals <= self.config.convergence.epsilon))

    def _m_step(
        self,
        data: ComparisonData,
        e_result: EStepResult,
        b: float,
    ) -> NDArray[np.float64]:
        """
        M-step: unnormalized strength update.

        Raises:
            NumericalFailureError: If an item's denominator is not positive,
                e.g. an item with no comparisons and b = 0.
        """
        denom = row_sums(e_result.expected) + b
        if np.any(denom <= 0):
            item = int(np.argmax(denom <= 0))
            raise NumericalFailureError(
                f"M-step denominator for item {item} is {denom[item]}"
            )
        pi: NDArray[np.float64] = data.numerator / denom
        return pi

    def fit(self, matrix: CSCMatrix, a: float, b: float) -> BTEstimationResult:
        """
        Fit Bradley-Terry strengths to comparison counts.

        Args:
            matrix: K x K win counts in CSC form, W[i, j] = wins of i over j.
                Diagonal entries are ignored.
            a: Prior on wins.
            b: Prior on comparisons.

        Returns:
            BTEstimationResult with normalized strengths and convergence
            information.

        Raises:
            InvalidArgumentError: For invalid inputs, before any computation.
            NumericalFailureError: If the iteration breaks down numerically.
        """
        _validate_priors(a, b)

        data = ingest_comparisons(matrix, a)
        pi, method = compute_starting_values(
            data.wins, self.config.initialization
        )
        logger.debug(f"Starting values: {method.value}")

        max_iterations = self.config.convergence.max_iterations
        convergence_status = ConvergenceStatus.MAX_ITERATIONS
        max_residual = float("nan")
        n_iterations = 0

        for iteration in range(max_iterations):
            e_result = self._e_step(data, pi)

            residuals = self._compute_residuals(data, e_result, pi, b)
            max_residual = float(np.max(residuals))
            converged = self._check_convergence(residuals)
            logger.debug(
                f"Iteration {iteration + 1}: max residual = {max_residual:.6g}"
            )

            # M-step runs in the converging round too
            pi = self._m_step(data, e_result, b)
            n_iterations = iteration + 1

            if converged:
                convergence_status = ConvergenceStatus.CONVERGED
                break

        if convergence_status != ConvergenceStatus.CONVERGED:
            logger.warning(
                f"EM did not converge in {max_iterations} iterations "
                f"(max residual = {max_residual:.6g})"
            )

        return BTEstimationResult(
            pi=tuple(normalize(pi).tolist()),
            iters=n_iterations,
            convergence_status=convergence_status,
            max_residual=max_residual,
            initialization=method,
            model_version=self.config.model_version,
        )


def bt_em(
    matrix: CSCMatrix,
    a: float,
    b: float,
    maxit: int = DEFAULT_MAX_ITERATIONS,
    epsilon: float = DEFAULT_EPSILON,
) -> BTEstimationResult:
    """
    Fit Bradley-Terry strengths with the default configuration.

    Args:
        matrix: K x K win counts in CSC form.
        a: Prior on wins.
        b: Prior on comparisons.
        maxit: Maximum number of EM rounds.
        epsilon: Per-item convergence tolerance.

    Returns:
        BTEstimationResult; check `converged` before trusting `pi`.
    """
    config = EstimationConfig(
        convergence=ConvergenceConfig(max_iterations=maxit, epsilon=epsilon)
    )
    return BradleyTerryEMEstimator(config).fit(matrix, a, b)

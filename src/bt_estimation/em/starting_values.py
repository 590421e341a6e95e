"""
Starting value computation for Bradley-Terry EM.

Two strategies are available:
- uniform: pi_i = 1 / K
- spectral: |dominant eigenvector| of the column-normalized win matrix,
  approximating the stationary distribution of the preference graph
"""

import logging

import numpy as np
from numpy.typing import NDArray
from scipy import sparse
from scipy.sparse.linalg import ArpackError, ArpackNoConvergence, eigs

from bt_estimation.core.errors import NumericalFailureError
from bt_estimation.core.utils import get_rng
from bt_estimation.em.config import InitializationConfig
from bt_estimation.em.enums import InitializationMethod
from bt_estimation.em.ingestion import col_sums

logger = logging.getLogger(__name__)

MIN_SPECTRAL_ITEMS = 3
SPECTRAL_START_SEED = 0
# Entries below this fraction of the largest one count as zero mass
SPECTRAL_MIN_RELATIVE_MASS = 1e-8


def use_spectral_initialization(wins: sparse.spmatrix) -> bool:
    """
    Decide whether the spectral start applies.

    Requires more than two items and a non-zero sum in every column, so
    that column normalization is defined and ARPACK has room to work.

    Args:
        wins: Diagonal-free win matrix, shape (K, K).

    Returns:
        True if spectral starting values should be computed.
    """
    if wins.shape[0] < MIN_SPECTRAL_ITEMS:
        return False
    return bool(np.all(col_sums(wins) != 0))


def uniform_starting_values(n_items: int) -> NDArray[np.float64]:
    """Equal strength for every item."""
    return np.full(n_items, 1.0 / n_items, dtype=np.float64)


def column_normalize(wins: sparse.spmatrix) -> sparse.csc_matrix:
    """Divide every column by its sum."""
    scale = sparse.diags(1.0 / col_sums(wins))
    return sparse.csc_matrix(wins @ scale)


def spectral_starting_values(wins: sparse.spmatrix) -> NDArray[np.float64]:
    """
    Absolute dominant eigenvector of the column-normalized win matrix.

    ARPACK is started from a fixed-seed vector so repeated calls give
    identical results.

    Args:
        wins: Diagonal-free win matrix with non-zero column sums.

    Returns:
        Array of shape (K,), not normalized.

    Raises:
        NumericalFailureError: If the eigen-solver fails or some item gets
            (numerically) zero mass, as happens for reducible win graphs.
    """
    n_items = wins.shape[0]
    normalized = column_normalize(wins)
    v0 = get_rng(SPECTRAL_START_SEED).random(n_items)

    try:
        _, eigenvectors = eigs(normalized, k=1, which="LM", v0=v0)
    except (ArpackNoConvergence, ArpackError) as e:
        raise NumericalFailureError(
            f"Eigen-decomposition for starting values failed: {e}"
        ) from e

    pi: NDArray[np.float64] = np.abs(eigenvectors[:, 0]).astype(np.float64)
    if not np.all(np.isfinite(pi)):
        raise NumericalFailureError(
            "Eigen-decomposition for starting values returned non-finite values"
        )
    if not np.all(pi > SPECTRAL_MIN_RELATIVE_MASS * pi.max()):
        raise NumericalFailureError(
            "Eigen-decomposition for starting values is not strictly positive "
            f"(min = {pi.min():.3g}, max = {pi.max():.3g})"
        )
    return pi


def compute_starting_values(
    wins: sparse.spmatrix,
    config: InitializationConfig,
) -> tuple[NDArray[np.float64], InitializationMethod]:
    """
    Choose and compute starting values.

    Args:
        wins: Diagonal-free win matrix, shape (K, K).
        config: Initialization settings.

    Returns:
        Tuple of (pi, method actually used).

    Raises:
        NumericalFailureError: If the eigen-solver fails and fallback is
            disabled.
    """
    n_items = wins.shape[0]

    if not (config.use_spectral and use_spectral_initialization(wins)):
        return uniform_starting_values(n_items), InitializationMethod.UNIFORM

    try:
        return spectral_starting_values(wins), InitializationMethod.SPECTRAL
    except NumericalFailureError as e:
        if not config.fallback_to_uniform:
            raise
        logger.warning(f"{e.message}; falling back to uniform start")
        return uniform_starting_values(n_items), InitializationMethod.UNIFORM

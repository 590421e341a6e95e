"""
Ingestion of pairwise comparison counts.

Builds the per-call working structures: the diagonal-free win matrix W,
the fixed sparsity pattern of N = W + W^T with its original values, and the
EM numerator rowSum(W) + a - 1.
"""

import logging

import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from bt_estimation.core.errors import InvalidArgumentError
from bt_estimation.core.sparse import CSCMatrix, SparsePattern, zero_diagonal
from bt_estimation.em.data_models import ComparisonData

logger = logging.getLogger(__name__)

MIN_ITEMS = 2


def row_sums(matrix: sparse.spmatrix) -> NDArray[np.float64]:
    """Row sums of a sparse matrix as a flat array."""
    return np.asarray(matrix.sum(axis=1), dtype=np.float64).ravel()


def col_sums(matrix: sparse.spmatrix) -> NDArray[np.float64]:
    """Column sums of a sparse matrix as a flat array."""
    return np.asarray(matrix.sum(axis=0), dtype=np.float64).ravel()


def symmetrize(wins: sparse.spmatrix) -> sparse.csr_matrix:
    """Total comparisons per pair, N = W + W^T."""
    return sparse.csr_matrix(wins + wins.T)


def ingest_comparisons(matrix: CSCMatrix, a: float) -> ComparisonData:
    """
    Build working structures from a raw comparison matrix.

    Args:
        matrix: K x K win counts, W[i, j] = wins of i over j.
        a: Prior on wins, enters the numerator as a - 1.

    Returns:
        ComparisonData with W, the N pattern and values, and the numerator.

    Raises:
        InvalidArgumentError: If fewer than two items are given, or if
            some item has wins + a - 1 < 0 (its strength would go negative).
    """
    if matrix.n_rows < MIN_ITEMS:
        raise InvalidArgumentError(
            f"at least {MIN_ITEMS} items are required, got {matrix.n_rows}"
        )

    wins = zero_diagonal(matrix.to_scipy())
    pattern, pair_counts = SparsePattern.from_matrix(symmetrize(wins))
    numerator = row_sums(wins) + (a - 1.0)
    if np.any(numerator < 0):
        item = int(np.argmin(numerator))
        raise InvalidArgumentError(
            f"wins + a - 1 must be >= 0 for every item, got {numerator[item]} "
            f"for item {item}"
        )

    logger.debug(
        f"Ingested {matrix.n_rows} items, {wins.nnz} win entries, "
        f"{pattern.nnz} pair entries"
    )

    return ComparisonData(
        wins=wins,
        pattern=pattern,
        pair_counts=pair_counts,
        numerator=numerator,
    )

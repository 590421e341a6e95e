"""
Diagnostic utilities for Bradley-Terry model validation.

Provides functions to compare empirical win rates against model-predicted
win probabilities, and to score strengths by log-likelihood.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from bt_estimation.core.sparse import CSCMatrix, zero_diagonal
from bt_estimation.em.data_models import BTEstimationResult


@dataclass
class WinRateComparison:
    """Comparison of empirical vs model win rates, one row per observed pair.

    Pairs are stored with item_i < item_j; rates are for item_i beating item_j.
    """

    item_i: NDArray[np.int64]
    item_j: NDArray[np.int64]
    n_comparisons: NDArray[np.float64]
    empirical_win_rate: NDArray[np.float64]
    model_win_rate: NDArray[np.float64]
    difference: NDArray[np.float64]


def compute_win_rate_comparison(
    matrix: CSCMatrix,
    model: BTEstimationResult,
) -> WinRateComparison:
    """Compare empirical vs model win rates for every compared pair.

    Args:
        matrix: Win counts the model was fitted on.
        model: Fitted Bradley-Terry model.

    Returns:
        WinRateComparison over pairs with at least one comparison.
    """
    wins = sparse.csr_matrix(zero_diagonal(matrix.to_scipy()))
    totals = sparse.triu(wins + wins.T, k=1).tocoo()
    pi = model.pi_array()

    item_i = totals.row.astype(np.int64)
    item_j = totals.col.astype(np.int64)
    n_comparisons = totals.data.astype(np.float64)

    wins_ij = np.asarray(wins[item_i, item_j], dtype=np.float64).ravel()
    empirical = wins_ij / n_comparisons
    model_rate = pi[item_i] / (pi[item_i] + pi[item_j])

    return WinRateComparison(
        item_i=item_i,
        item_j=item_j,
        n_comparisons=n_comparisons,
        empirical_win_rate=empirical,
        model_win_rate=model_rate,
        difference=empirical - model_rate,
    )


def log_likelihood(matrix: CSCMatrix, pi: NDArray[np.float64]) -> float:
    """
    Bradley-Terry log-likelihood of win counts under strengths pi.

    LL = sum_{i != j} W_ij * (log pi_i - log(pi_i + pi_j))

    Args:
        matrix: Win counts, W[i, j] = wins of i over j.
        pi: Strictly positive strengths, shape (K,).

    Returns:
        Log-likelihood (up to the binomial coefficient constant).
    """
    pi = np.asarray(pi, dtype=np.float64)
    wins = zero_diagonal(matrix.to_scipy()).tocoo()
    rows, cols = wins.row, wins.col
    terms = wins.data * (np.log(pi[rows]) - np.log(pi[rows] + pi[cols]))
    return float(np.sum(terms))

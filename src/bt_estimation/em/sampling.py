"""
Comparison sampling for Bradley-Terry models.

Generates synthetic win counts for known strengths, used to check that the
estimator recovers them.
"""

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from scipy import sparse

from bt_estimation.core.errors import InvalidArgumentError
from bt_estimation.core.sparse import CSCMatrix
from bt_estimation.core.utils import get_rng


def sample_comparisons(
    pi: NDArray[np.float64],
    n_per_pair: int,
    rng: Generator | None = None,
    pair_density: float = 1.0,
) -> CSCMatrix:
    """
    Sample win counts for pairs of items under Bradley-Terry strengths.

    Each selected pair (i, j) is compared n_per_pair times; i wins each
    comparison with probability pi_i / (pi_i + pi_j).

    Args:
        pi: Strictly positive strengths, shape (K,).
        n_per_pair: Number of comparisons per selected pair.
        rng: Random number generator.
        pair_density: Probability that a given pair is compared at all.

    Returns:
        CSCMatrix with W[i, j] = wins of i over j.
    """
    if rng is None:
        rng = get_rng()

    pi = np.asarray(pi, dtype=np.float64)
    if np.any(pi <= 0):
        raise InvalidArgumentError("pi must be strictly positive")
    if n_per_pair < 0:
        raise InvalidArgumentError(
            f"n_per_pair must be >= 0, got {n_per_pair}"
        )
    if not 0.0 <= pair_density <= 1.0:
        raise InvalidArgumentError(
            f"pair_density must lie in [0, 1], got {pair_density}"
        )

    n_items = len(pi)
    item_i, item_j = np.triu_indices(n_items, k=1)

    selected = rng.random(len(item_i)) < pair_density
    item_i, item_j = item_i[selected], item_j[selected]

    p_win = pi[item_i] / (pi[item_i] + pi[item_j])
    wins_ij = rng.binomial(n_per_pair, p_win).astype(np.float64)
    wins_ji = n_per_pair - wins_ij

    rows = np.concatenate([item_i, item_j])
    cols = np.concatenate([item_j, item_i])
    counts = np.concatenate([wins_ij, wins_ji])

    wins = sparse.coo_matrix((counts, (rows, cols)), shape=(n_items, n_items))
    return CSCMatrix.from_scipy(wins)

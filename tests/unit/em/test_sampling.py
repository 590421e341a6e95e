"""
Tests for synthetic comparison sampling.
"""

import numpy as np
import pytest

from bt_estimation.core.errors import InvalidArgumentError
from bt_estimation.core.utils import get_rng
from bt_estimation.em.sampling import sample_comparisons


class TestSampleComparisons:
    def test_pair_totals(self) -> None:
        """Every pair should be compared exactly n_per_pair times."""
        pi = np.array([0.1, 0.2, 0.3, 0.4])
        wins = sample_comparisons(pi, n_per_pair=25, rng=get_rng(0)).to_scipy()
        dense = wins.toarray()

        totals = dense + dense.T
        off_diagonal = ~np.eye(4, dtype=bool)
        np.testing.assert_array_equal(totals[off_diagonal], 25.0)
        np.testing.assert_array_equal(np.diag(dense), 0.0)

    def test_reproducible(self) -> None:
        pi = np.array([1.0, 2.0, 3.0])
        first = sample_comparisons(pi, n_per_pair=10, rng=get_rng(7))
        second = sample_comparisons(pi, n_per_pair=10, rng=get_rng(7))

        np.testing.assert_array_equal(
            first.to_scipy().toarray(), second.to_scipy().toarray()
        )

    def test_stronger_item_wins_more(self) -> None:
        pi = np.array([1.0, 9.0])
        dense = sample_comparisons(
            pi, n_per_pair=2000, rng=get_rng(1)
        ).to_scipy().toarray()

        # Expected 1800 wins for item 1
        assert abs(dense[1, 0] - 1800) < 100

    def test_zero_density_gives_empty_matrix(self) -> None:
        wins = sample_comparisons(
            np.ones(5), n_per_pair=3, rng=get_rng(0), pair_density=0.0
        )
        assert wins.n_rows == 5
        assert wins.to_scipy().sum() == 0

    def test_rejects_non_positive_strengths(self) -> None:
        with pytest.raises(InvalidArgumentError, match="strictly positive"):
            sample_comparisons(np.array([1.0, 0.0]), n_per_pair=1)

    def test_rejects_bad_density(self) -> None:
        with pytest.raises(InvalidArgumentError, match="pair_density"):
            sample_comparisons(np.ones(3), n_per_pair=1, pair_density=1.5)

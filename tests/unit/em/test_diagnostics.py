"""
Tests for model fit diagnostics.
"""

import numpy as np
import pytest

from bt_estimation.core.sparse import CSCMatrix
from bt_estimation.em.diagnostics import (
    compute_win_rate_comparison,
    log_likelihood,
)
from bt_estimation.em.estimator import bt_em


@pytest.fixture
def three_item_wins() -> CSCMatrix:
    return CSCMatrix.from_dense(
        np.array(
            [
                [0.0, 5.0, 1.0],
                [2.0, 0.0, 3.0],
                [6.0, 4.0, 0.0],
            ]
        )
    )


class TestWinRateComparison:
    def test_one_row_per_pair(self, three_item_wins: CSCMatrix) -> None:
        model = bt_em(three_item_wins, a=3.0, b=1.0)
        comparison = compute_win_rate_comparison(three_item_wins, model)

        assert len(comparison.item_i) == 3
        assert (comparison.item_i < comparison.item_j).all()
        np.testing.assert_array_equal(comparison.n_comparisons, 7.0)

    def test_empirical_rates(self, three_item_wins: CSCMatrix) -> None:
        model = bt_em(three_item_wins, a=3.0, b=1.0)
        comparison = compute_win_rate_comparison(three_item_wins, model)

        expected = {(0, 1): 5 / 7, (0, 2): 1 / 7, (1, 2): 3 / 7}
        for i, j, rate in zip(
            comparison.item_i,
            comparison.item_j,
            comparison.empirical_win_rate,
        ):
            assert rate == pytest.approx(expected[(int(i), int(j))])

    def test_model_rates_and_difference(
        self, three_item_wins: CSCMatrix
    ) -> None:
        model = bt_em(three_item_wins, a=3.0, b=1.0)
        comparison = compute_win_rate_comparison(three_item_wins, model)
        pi = model.pi_array()

        expected_model = pi[comparison.item_i] / (
            pi[comparison.item_i] + pi[comparison.item_j]
        )
        np.testing.assert_allclose(comparison.model_win_rate, expected_model)
        np.testing.assert_allclose(
            comparison.difference,
            comparison.empirical_win_rate - comparison.model_win_rate,
        )
        assert (np.abs(comparison.difference) < 0.5).all()


class TestLogLikelihood:
    def test_uniform_strengths(self, three_item_wins: CSCMatrix) -> None:
        """Equal strengths give log(1/2) per comparison."""
        ll = log_likelihood(three_item_wins, np.ones(3))
        assert ll == pytest.approx(21 * np.log(0.5))

    def test_fitted_beats_reversed(self, three_item_wins: CSCMatrix) -> None:
        model = bt_em(three_item_wins, a=3.0, b=1.0)
        pi = model.pi_array()

        assert log_likelihood(three_item_wins, pi) > log_likelihood(
            three_item_wins, pi[::-1]
        )

    def test_scale_invariant(self, three_item_wins: CSCMatrix) -> None:
        pi = np.array([0.2, 0.3, 0.5])
        assert log_likelihood(three_item_wins, pi) == pytest.approx(
            log_likelihood(three_item_wins, 10 * pi)
        )

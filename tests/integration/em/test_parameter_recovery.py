import numpy as np
import pytest

from bt_estimation.core.utils import get_rng, normalize
from bt_estimation.em.diagnostics import compute_win_rate_comparison
from bt_estimation.em.estimator import bt_em
from bt_estimation.em.sampling import sample_comparisons

N_ITEMS = 10
N_PER_PAIR = 200


class TestParameterRecovery:
    """
    With enough comparisons per pair, the fitted strengths should track the
    strengths the data was generated from.
    """

    @pytest.fixture
    def true_pi(self) -> np.ndarray:
        return normalize(np.exp(np.linspace(-1.5, 1.5, N_ITEMS)))

    def test_strength_recovery_complete_graph(self, true_pi: np.ndarray) -> None:
        wins = sample_comparisons(true_pi, N_PER_PAIR, rng=get_rng(42))
        result = bt_em(wins, a=1.1, b=0.1, maxit=500)
        pi = result.pi_array()

        np.testing.assert_allclose(pi.sum(), 1.0, atol=1e-9)
        assert (pi > 0).all()
        assert np.corrcoef(np.log(pi), np.log(true_pi))[0, 1] > 0.95
        assert int(np.argmax(pi)) == N_ITEMS - 1
        assert int(np.argmin(pi)) == 0

    def test_strength_recovery_sparse_graph(self, true_pi: np.ndarray) -> None:
        """A third of the pairs unobserved still yields a sensible ordering."""
        wins = sample_comparisons(
            true_pi, N_PER_PAIR, rng=get_rng(3), pair_density=0.7
        )
        result = bt_em(wins, a=1.1, b=0.1, maxit=500)
        pi = result.pi_array()

        np.testing.assert_allclose(pi.sum(), 1.0, atol=1e-9)
        assert np.corrcoef(np.log(pi), np.log(true_pi))[0, 1] > 0.9

    def test_model_win_rates_match_data(self, true_pi: np.ndarray) -> None:
        wins = sample_comparisons(true_pi, N_PER_PAIR, rng=get_rng(11))
        result = bt_em(wins, a=1.1, b=0.1, maxit=500)
        comparison = compute_win_rate_comparison(wins, result)

        assert np.abs(comparison.difference).mean() < 0.05

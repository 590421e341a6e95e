"""
Core utility functions shared across the estimation modules.
"""

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from bt_estimation.core.errors import NumericalFailureError


def get_rng(seed: int | None = None) -> Generator:
    """
    Create a numpy random Generator with optional seed.

    Args:
        seed: Random seed for reproducibility. If None, uses entropy.

    Returns:
        A numpy random Generator instance.
    """
    return np.random.default_rng(seed)


def normalize(weights: NDArray[np.floating]) -> NDArray[np.float64]:
    """
    Scale a non-negative weight vector so that it sums to 1.

    Args:
        weights: Array of non-negative weights.

    Returns:
        Array of the same shape whose elements sum to 1.

    Raises:
        NumericalFailureError: If the total is not a positive finite number.
    """
    total = float(np.sum(weights))
    if not np.isfinite(total) or total <= 0.0:
        raise NumericalFailureError(
            f"Cannot normalize weights with total {total}"
        )
    result: NDArray[np.float64] = np.asarray(weights, dtype=np.float64) / total
    return result

"""
Core shared types and utilities for Bradley-Terry estimation.

This module provides the sparse containers, error types and small numeric
helpers used by the EM estimator and its diagnostics.
"""

from bt_estimation.core.errors import (
    BTEstimationError,
    InvalidArgumentError,
    NumericalFailureError,
)
from bt_estimation.core.sparse import CSCMatrix, SparsePattern
from bt_estimation.core.utils import get_rng, normalize

__all__ = [
    "BTEstimationError",
    "CSCMatrix",
    "InvalidArgumentError",
    "NumericalFailureError",
    "SparsePattern",
    "get_rng",
    "normalize",
]

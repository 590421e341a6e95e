"""
Bradley-Terry estimation module.

This module provides estimation of item strengths from pairwise comparison
counts using an EM fixed-point iteration.

Key components:
- EstimationConfig: Configuration for estimation
- CSCMatrix: Input data representation
- BTEstimationResult: Output from estimation
- BradleyTerryEMEstimator / bt_em: The estimator
- compute_win_rate_comparison: Model fit diagnostics
- sample_comparisons: Synthetic data for known strengths
"""

from bt_estimation.em.config import (
    ConvergenceConfig,
    EstimationConfig,
    InitializationConfig,
    default_config,
)
from bt_estimation.em.data_models import BTEstimationResult
from bt_estimation.em.diagnostics import (
    WinRateComparison,
    compute_win_rate_comparison,
    log_likelihood,
)
from bt_estimation.em.enums import ConvergenceStatus, InitializationMethod
from bt_estimation.em.estimator import BradleyTerryEMEstimator, bt_em
from bt_estimation.em.sampling import sample_comparisons

__all__ = [
    "BTEstimationResult",
    "BradleyTerryEMEstimator",
    "ConvergenceConfig",
    "ConvergenceStatus",
    "EstimationConfig",
    "InitializationConfig",
    "InitializationMethod",
    "WinRateComparison",
    "bt_em",
    "compute_win_rate_comparison",
    "default_config",
    "log_likelihood",
    "sample_comparisons",
]

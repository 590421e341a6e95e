"""
Configuration dataclasses for Bradley-Terry EM estimation.

This module defines the configuration parameters for:
- Convergence criteria for the EM algorithm
- Starting value strategy
- Overall estimation settings
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import metadata

import toml

from bt_estimation.core.errors import InvalidArgumentError
from bt_estimation.core.paths import ProjectRootNotFound, get_project_root_dir

logger = logging.getLogger(__name__)

# Default convergence settings
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_EPSILON = 1e-2

# Default initialization settings
DEFAULT_USE_SPECTRAL = True
DEFAULT_FALLBACK_TO_UNIFORM = True

# Distribution name used for the recorded model version
PROJECT_NAME = "bt-estimation"
UNKNOWN_VERSION = "unknown"


@lru_cache(maxsize=1)
def _get_project_version() -> str:
    try:
        return metadata.version(PROJECT_NAME)
    except metadata.PackageNotFoundError:
        pass

    # Source checkout without an install
    try:
        root_dir = get_project_root_dir()
    except ProjectRootNotFound:
        logger.warning(f"{PROJECT_NAME} is not installed; version unknown")
        return UNKNOWN_VERSION

    with open(root_dir / "pyproject.toml") as f:
        project = toml.load(f).get("project", {})

    version = project.get("version")
    if project.get("name") != PROJECT_NAME or not isinstance(version, str):
        logger.warning(
            f"pyproject.toml at {root_dir} does not describe {PROJECT_NAME}; "
            "version unknown"
        )
        return UNKNOWN_VERSION
    return version


@dataclass(frozen=True)
class ConvergenceConfig:
    """
    Configuration for EM algorithm convergence.

    Attributes:
        max_iterations: Maximum number of EM rounds.
        epsilon: Per-item tolerance on |numerator - implied row sum|.
            EM stops once every item is within tolerance.
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    epsilon: float = DEFAULT_EPSILON

    def __post_init__(self) -> None:
        if self.max_iterations < 0:
            raise InvalidArgumentError(
                f"max_iterations must be >= 0, got {self.max_iterations}"
            )
        if not self.epsilon >= 0:
            raise InvalidArgumentError(
                f"epsilon must be >= 0, got {self.epsilon}"
            )


@dataclass(frozen=True)
class InitializationConfig:
    """
    Configuration for starting values.

    Attributes:
        use_spectral: Allow the dominant-eigenvector start when the
            comparison graph qualifies (more than 2 items, no all-zero
            column). When False, always start uniform.
        fallback_to_uniform: If the eigen-solver fails, start uniform
            instead of raising NumericalFailureError.
    """

    use_spectral: bool = DEFAULT_USE_SPECTRAL
    fallback_to_uniform: bool = DEFAULT_FALLBACK_TO_UNIFORM


@dataclass(frozen=True)
class EstimationConfig:
    """
    Master configuration for Bradley-Terry EM estimation.

    Attributes:
        convergence: Convergence criteria for the EM loop.
        initialization: Starting value strategy.
        model_version: Version string for reproducibility tracking.
    """

    convergence: ConvergenceConfig = ConvergenceConfig()
    initialization: InitializationConfig = InitializationConfig()
    model_version: str = field(default_factory=_get_project_version)


def default_config() -> EstimationConfig:
    """Create a default estimation configuration."""
    return EstimationConfig()

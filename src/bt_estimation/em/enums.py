from enum import Enum


class ConvergenceStatus(str, Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"


class InitializationMethod(str, Enum):
    UNIFORM = "uniform"
    SPECTRAL = "spectral"

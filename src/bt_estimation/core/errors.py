class BTEstimationError(Exception):
    pass


class InvalidArgumentError(BTEstimationError, ValueError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NumericalFailureError(BTEstimationError, ArithmeticError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

class GdRegressError(RuntimeError):
    """Base error of the toolkit.

    Carries a human-readable message and, optionally, the exception that
    caused it.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidInputError(GdRegressError):
    """Raised when the dataset or configuration cannot be used at all."""


class ComputationAnomalyError(GdRegressError):
    """Raised when a matrix computation produces an unexpected shape."""


class DivergenceError(ComputationAnomalyError):
    """Raised when gradient descent cost goes up instead of down."""

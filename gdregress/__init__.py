from .errors import ComputationAnomalyError, DivergenceError, GdRegressError, InvalidInputError
from .linear_regression import LinearRegression
from .model import Model, linear_regression
from .settings import Settings, load_settings
from .split_policy import SplitPolicy

__all__ = [
    "GdRegressError", "InvalidInputError", "ComputationAnomalyError", "DivergenceError",
    "LinearRegression",
    "Model", "linear_regression",
    "Settings", "load_settings",
    "SplitPolicy",
]

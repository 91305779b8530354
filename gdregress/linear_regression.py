import numpy as np

from gdregress.cost_monitor import CostMonitor
from gdregress.errors import ComputationAnomalyError, InvalidInputError
from gdregress.logs import Logger, get_logger
from gdregress.partition import Partition
from gdregress.settings import Settings

NORMAL_EQUATION_MAX_FEATURES = 100


class LinearRegression:
    """Linear Regression trained by the normal equation or batch gradient descent.

    Minimizes the cost J(theta) = (1 / 2m) * sum((h - y)^2), where the
    hypothesis is h = theta0 + theta1 * x1 + ... + thetaN * xN.

    Gradient descent update:
        theta = theta - (alpha / m) * (X theta' - Y)' X
    """

    def __init__(self, settings: Settings | None = None, logger: Logger | None = None) -> None:
        self.settings = settings or Settings()
        self.logger = logger or get_logger(__name__)
        self.theta: np.ndarray | None = None
        self.method: str | None = None
        self.iterations: int = 0
        self.cost_history: list[float] = []
        self.grad_history: list[float] = []
        self.coef_history: list[np.ndarray] = []

    def analyze(self, partition: Partition) -> "LinearRegression":
        """Calculate the theta vector from the training partition."""
        if partition.is_empty:
            raise InvalidInputError("Training set is empty, nothing to analyze.")

        if not self._try_normal_equation(partition):
            self._gradient_descent(partition)
        return self

    def _try_normal_equation(self, partition: Partition) -> bool:
        """theta = (X'X)^-1 X'Y, in one go.

        Inverting X'X is roughly O(n^3), so this is only tried for small
        feature spaces. Off unless ``settings.use_normal_equation`` is set.
        """
        if not self.settings.use_normal_equation:
            return False

        features, samples = partition.features_count, partition.samples_count
        if features > NORMAL_EQUATION_MAX_FEATURES or samples < features:
            self.logger.info(
                "Normal equation seems not applicable due to the feature-space size, resorting to gradient descent."
            )
            return False

        X, Y = partition.X, partition.Y
        try:
            theta = np.linalg.inv(X.T @ X) @ X.T @ Y
        except np.linalg.LinAlgError as exc:
            self.logger.warning("Normal equation failed to complete.", exc)
            return False

        self.theta = theta.T
        self.method = "normal_equation"
        self.iterations = 0
        return True

    def _gradient_descent(self, partition: Partition) -> None:
        settings = self.settings
        monitor = CostMonitor(
            partition,
            convergence_delta=settings.convergence_delta,
            mode=settings.notification_mode,
            logger=self.logger,
        )
        X, Y = partition.X, partition.Y

        theta = np.zeros((1, partition.features_count), dtype=float)
        self.grad_history = []
        self.coef_history = []
        multiplier = settings.learning_rate / partition.samples_count

        for _ in range(settings.max_iterations):
            gradient = (X @ theta.T - Y).T @ X
            theta = theta - multiplier * gradient

            self.grad_history.append(float(np.linalg.norm(gradient)))
            self.coef_history.append(theta.ravel().copy())
            if monitor.is_converged(theta):
                break

        self.theta = theta
        self.method = "gradient_descent"
        self.iterations = monitor.iterations
        self.cost_history = monitor.cost_history
        final_cost = self.cost_history[-1] if self.cost_history else float("nan")
        self.logger.info(f"Gradient descent finished after {self.iterations} iterations, cost={final_cost:.6f}.")

    def predict(self, item: Partition) -> float:
        """Predict the label of a single-row partition: y = X theta'."""
        if self.theta is None:
            raise InvalidInputError("Model is not trained yet.")

        prediction = item.X @ self.theta.T
        if prediction.shape != (1, 1):
            raise ComputationAnomalyError(
                "Failed to calculate the prediction. Instead of a raw number, "
                f"getting a {prediction.shape[0]}x{prediction.shape[1]} matrix."
            )
        return float(prediction[0, 0])

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from gdregress.errors import DivergenceError
from gdregress.logs import Logger, get_logger
from gdregress.partition import Partition

DEFAULT_WINDOW = 5
DEFAULT_CONVERGENCE_DELTA = 1e-6


class NotificationMode(Enum):
    RAISE = "raise"
    LOG = "log"


class CostMonitor:
    """Keeps the cost function values and watches that they really go down.

    Cost: J(theta) = (1 / 2m) * (X theta' - Y)' (X theta' - Y)

    Every ``window`` iterations the last ``window`` steps vote: +1 for each
    step where the cost decreased, -1 otherwise. A negative balance means
    gradient descent is probably diverging.
    """

    def __init__(
        self,
        partition: Partition,
        convergence_delta: float = DEFAULT_CONVERGENCE_DELTA,
        mode: NotificationMode = NotificationMode.RAISE,
        window: int = DEFAULT_WINDOW,
        logger: Logger | None = None,
    ) -> None:
        self.partition = partition
        self.convergence_delta = convergence_delta
        self.mode = mode
        self.window = window
        self.logger = logger or get_logger(__name__)
        self.cost_history: list[float] = []
        self.iterations = 0

    def cost(self, theta: np.ndarray) -> float:
        X, Y = self.partition.X, self.partition.Y
        residual = X @ theta.T - Y
        j = residual.T @ residual
        if j.shape != (1, 1):
            self.logger.error(
                "Failed to calculate cost function. Instead of a raw number, "
                f"getting a {j.shape[0]}x{j.shape[1]} matrix."
            )
            return math.inf
        return float(j[0, 0]) / (2 * self.partition.samples_count)

    def is_converged(self, theta: np.ndarray) -> bool:
        """Record the cost of ``theta`` and tell whether the descent has settled.

        Returns True when the last two costs differ by no more than the
        convergence delta, once at least ``window`` costs are known.
        """
        return self.record(self.cost(theta))

    def record(self, cost: float) -> bool:
        self.cost_history.append(cost)
        self.iterations += 1
        if self.iterations % self.window == 0:
            self._ensure_cost_decrease()

        if len(self.cost_history) < self.window:
            return False

        last, previous = self.cost_history[-1], self.cost_history[-2]
        return abs(last - previous) <= self.convergence_delta

    def _ensure_cost_decrease(self) -> None:
        recent = self.cost_history[-(self.window + 1):]
        balance = sum(1 if before > after else -1 for before, after in zip(recent, recent[1:]))
        if balance >= 0:
            return

        values = ", ".join(f"{cost:.4f}" for cost in self.cost_history[-self.window:])
        message = (
            f"Over the last {self.window} iterations the cost mostly goes up: {values}. "
            "Looks like gradient descent is diverging."
        )
        if self.mode is NotificationMode.RAISE:
            raise DivergenceError(message)
        self.logger.warning(message)

from __future__ import annotations

from typing import List

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression as SklearnLinearRegression
from sklearn.metrics import mean_squared_error, r2_score

from gdregress.logs import get_logger
from gdregress.model import Estimator, Model
from gdregress.partition import Partition

_LOGGER = get_logger(__name__)


def partition_predictions(estimator: Estimator, partition: Partition) -> np.ndarray:
    if partition.is_empty:
        return np.empty(0)
    rows = [Partition(partition.X[i:i + 1], partition.Y[i:i + 1]) for i in range(partition.samples_count)]
    return np.array([estimator.predict(row) for row in rows], dtype=float)


def _metrics(y_true: np.ndarray, y_pred: np.ndarray) -> dict:
    return {
        "mse": mean_squared_error(y_true, y_pred),
        "r2": r2_score(y_true, y_pred) if len(y_true) > 1 else float("nan"),
    }


def evaluate(model: Model) -> pd.DataFrame:
    """MSE and R^2 of the trained model on every non-empty partition."""
    model.analyze()
    records = []
    partitions = {
        "training": model.training_set,
        "cross_validation": model.cross_validation_set,
        "test": model.test_set,
    }
    for name, partition in partitions.items():
        if partition.is_empty:
            _LOGGER.debug(f"No samples in the {name} set, skipping.")
            continue
        y_pred = partition_predictions(model.estimator, partition)
        records.append({"partition": name, "samples": partition.samples_count, **_metrics(partition.Y.ravel(), y_pred)})
    return pd.DataFrame(records, columns=["partition", "samples", "mse", "r2"])


def compare_with_sklearn(model: Model) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Fit sklearn's LinearRegression on the same scaled training set.

    Metrics are reported on the test set, or on the training set when the
    dataset was not split.
    """
    model.analyze()
    training = model.training_set
    target = training if model.test_set.is_empty else model.test_set

    sk_model = SklearnLinearRegression().fit(training.X[:, 1:], training.Y.ravel())
    custom_pred = partition_predictions(model.estimator, target)
    sk_pred = sk_model.predict(target.X[:, 1:])
    y_true = target.Y.ravel()

    metrics = pd.DataFrame(
        [
            {"model": "custom", **_metrics(y_true, custom_pred)},
            {"model": "sklearn", **_metrics(y_true, sk_pred)},
        ]
    )

    theta = np.asarray(model.estimator.theta).ravel()
    names = ["intercept", *model.preprocessor.statistics.names]
    coef = pd.DataFrame(
        {
            "feature": names,
            "custom_coef": theta,
            "sklearn_coef": np.concatenate([[sk_model.intercept_], sk_model.coef_]),
        }
    )
    return metrics, coef


def plot_training_history(
    cost_history: List[float],
    coef_history: List[np.ndarray],
    feature_names: List[str],
    out_path: str,
    title: str = "Gradient Descent",
) -> bool:
    """Cost per iteration next to the theta trajectory, one line per coefficient.

    Returns False, and writes nothing, when there is no history to draw
    (for instance after a normal equation solve).
    """
    if not cost_history:
        return False

    fig, (cost_ax, coef_ax) = plt.subplots(1, 2, figsize=(11, 4))
    cost_ax.plot(np.arange(1, len(cost_history) + 1), cost_history)
    cost_ax.set_xlabel("Iteration")
    cost_ax.set_ylabel("Cost J(theta)")

    if coef_history:
        thetas = np.vstack(coef_history)
        for name, trajectory in zip(feature_names, thetas.T):
            coef_ax.plot(trajectory, label=name)
        coef_ax.legend(fontsize=8)
    coef_ax.set_xlabel("Iteration")
    coef_ax.set_ylabel("theta")

    fig.suptitle(f"{title} ({len(cost_history)} iterations, final cost {cost_history[-1]:.6g})")
    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
    return True

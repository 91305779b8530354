import numpy as np
import pytest

from gdregress.cost_monitor import NotificationMode
from gdregress.errors import ComputationAnomalyError, DivergenceError, InvalidInputError
from gdregress.linear_regression import LinearRegression
from gdregress.partition import Partition
from gdregress.settings import Settings


@pytest.fixture
def line():
    x = np.arange(1.0, 11.0).reshape(-1, 1)
    y = 3.0 + 2.0 * x.ravel()
    return Partition.from_arrays(x, y)


def test_gradient_descent_fits_a_line(line):
    settings = Settings(learning_rate=0.05, max_iterations=20000, convergence_delta=1e-12)
    model = LinearRegression(settings).analyze(line)

    assert model.method == "gradient_descent"
    np.testing.assert_allclose(model.theta, [[3.0, 2.0]], atol=1e-3)
    assert model.cost_history[-1] < model.cost_history[0]
    assert len(model.coef_history) == model.iterations == len(model.cost_history)


def test_gradient_descent_stops_at_max_iterations(line):
    model = LinearRegression(Settings(max_iterations=7)).analyze(line)
    assert model.iterations == 7
    assert model.theta.shape == (1, 2)


def test_too_large_learning_rate_diverges(line):
    with pytest.raises(DivergenceError):
        LinearRegression(Settings(learning_rate=1.0)).analyze(line)


def test_divergence_can_be_logged_instead(line, log_messages):
    settings = Settings(learning_rate=1.0, max_iterations=10, notification_mode=NotificationMode.LOG)
    model = LinearRegression(settings).analyze(line)

    assert model.iterations == 10
    assert any(entry.startswith("WARNING|") and "diverging" in entry for entry in log_messages)


def test_normal_equation_when_enabled(line):
    model = LinearRegression(Settings(use_normal_equation=True)).analyze(line)

    assert model.method == "normal_equation"
    np.testing.assert_allclose(model.theta, [[3.0, 2.0]], atol=1e-9)


def test_singular_normal_equation_falls_back(log_messages):
    x = np.array([[1.0, 1.0], [1.0, 1.0], [1.0, 1.0]])
    partition = Partition.from_arrays(x, np.array([1.0, 1.0, 1.0]))
    model = LinearRegression(Settings(use_normal_equation=True)).analyze(partition)

    assert model.method == "gradient_descent"
    assert any("Normal equation failed" in entry for entry in log_messages)


def test_normal_equation_skipped_with_fewer_samples_than_features():
    partition = Partition.from_arrays(np.array([[1.0, 2.0, 3.0]]), np.array([4.0]))
    model = LinearRegression(Settings(use_normal_equation=True, max_iterations=10)).analyze(partition)
    assert model.method == "gradient_descent"


def test_empty_training_set_is_rejected():
    with pytest.raises(InvalidInputError, match="Training set is empty"):
        LinearRegression().analyze(Partition.empty())


def test_predict_before_training_is_rejected(line):
    with pytest.raises(InvalidInputError, match="not trained"):
        LinearRegression().predict(line)


def test_predict_requires_a_single_row(line):
    model = LinearRegression(Settings(use_normal_equation=True)).analyze(line)

    single = Partition.from_arrays(np.array([[4.0]]), np.array([0.0]))
    assert model.predict(single) == pytest.approx(11.0)
    with pytest.raises(ComputationAnomalyError, match="getting a 10x1 matrix"):
        model.predict(line)

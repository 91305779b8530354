import sys

import numpy as np
import pandas as pd
import pytest

import main


@pytest.fixture
def houses_csv(tmp_path):
    size = np.array([1000, 852, 1416, 1534, 2104, 1600, 2400, 1380, 3000], dtype=float)
    rooms = np.array([1, 2, 3, 3, 3, 3, 3, 3, 4], dtype=float)
    df = pd.DataFrame({"size": size, "rooms": rooms, "city": ["a"] * 9, "price": 50.0 + 0.1 * size + 20.0 * rooms})
    path = tmp_path / "houses.csv"
    df.to_csv(path, index=False)
    return path


def test_prepare_features_keeps_numeric_columns(houses_csv):
    X, y = main.prepare_features(main.load_dataset(str(houses_csv)), "price")
    assert list(X.columns) == ["size", "rooms"]
    assert len(y) == 9


def test_prepare_features_requires_target(houses_csv):
    with pytest.raises(ValueError, match="Target column 'cost' not found"):
        main.prepare_features(main.load_dataset(str(houses_csv)), "cost")


def test_parse_item():
    assert main.parse_item(["size=1000", "rooms=2", "city=a"]) == {"size": 1000.0, "rooms": 2.0, "city": "a"}
    with pytest.raises(ValueError):
        main.parse_item(["size"])


def test_main_writes_results(houses_csv, tmp_path, monkeypatch, capsys):
    results_dir = tmp_path / "results"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "main",
            "--input", str(houses_csv),
            "--target", "price",
            "--split", "none",
            "--compare",
            "--predict", "size=1000", "rooms=1",
            "--results-dir", str(results_dir),
        ],
    )
    main.main()

    run_dirs = list((results_dir / "linear").iterdir())
    assert len(run_dirs) == 1
    for name in ["metrics.csv", "cost_history.csv", "training.png", "comparison.csv", "coefficients.csv"]:
        assert (run_dirs[0] / name).exists()

    output = capsys.readouterr().out
    assert "Prediction for {'size': 1000.0, 'rooms': 1.0}" in output


def test_build_settings_from_arguments():
    args = main.build_parser().parse_args(
        ["--input", "x.csv", "--target", "y", "--no-scale", "--sizes", "6", "2", "1", "--learning-rate", "0.1"]
    )
    settings = main.build_settings(args)

    assert settings.scale_and_normalize is False
    assert settings.split.sizes.total == 9
    assert settings.learning_rate == 0.1
    assert settings.max_iterations == 1500

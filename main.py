import argparse
import os
from datetime import datetime

import numpy as np
import pandas as pd

from gdregress.evaluation import compare_with_sklearn, evaluate, plot_training_history
from gdregress.model import linear_regression
from gdregress.settings import Settings, load_settings, parse_split

DEFAULT_RESULTS_DIR = "results"


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def load_dataset(path: str) -> pd.DataFrame:
    return pd.read_csv(path)


def prepare_features(df: pd.DataFrame, target: str) -> tuple[pd.DataFrame, pd.Series]:
    if target not in df.columns:
        raise ValueError(f"Target column '{target}' not found in input.")
    y = df[target]
    X = df.drop(columns=[target])
    X = X.select_dtypes(include=[np.number])
    return X, y


def parse_item(pairs: list[str]) -> dict:
    item = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Expected name=value, got '{pair}'.")
        name, value = pair.split("=", 1)
        try:
            item[name] = float(value)
        except ValueError:
            item[name] = value
    return item


def build_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config) if args.config else Settings()
    if args.no_scale:
        settings.scale_and_normalize = False
    if args.sizes:
        settings.split = parse_split(args.sizes)
    elif args.split:
        settings.split = parse_split(args.split)
    if args.learning_rate is not None:
        settings.learning_rate = args.learning_rate
    if args.max_iterations is not None:
        settings.max_iterations = args.max_iterations
    return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Train a gradient descent linear regression on a CSV dataset.")
    parser.add_argument("--input", required=True, help="CSV input with one sample per row.")
    parser.add_argument("--target", required=True, help="Label column.")
    parser.add_argument("--config", help="JSON settings file.")
    parser.add_argument("--no-scale", action="store_true", help="Disable feature scaling and mean normalization.")
    parser.add_argument("--split", choices=["default", "none"], help="Input split policy.")
    parser.add_argument(
        "--sizes",
        type=int,
        nargs=3,
        metavar=("TRAINING", "CROSS_VALIDATION", "TEST"),
        help="Explicit partition sizes; must add up to the number of rows.",
    )
    parser.add_argument("--learning-rate", type=float, help="Gradient descent learning rate.")
    parser.add_argument("--max-iterations", type=int, help="Gradient descent iteration ceiling.")
    parser.add_argument("--predict", nargs="+", metavar="NAME=VALUE", help="Features of a sample to predict.")
    parser.add_argument("--compare", action="store_true", help="Also fit sklearn's LinearRegression.")
    parser.add_argument("--results-dir", default=DEFAULT_RESULTS_DIR, help="Directory to save outputs.")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    df = load_dataset(args.input)
    X, y = prepare_features(df, args.target)

    settings = build_settings(args)
    model = linear_regression(X, y, settings)
    model.analyze()

    timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    out_dir = os.path.join(args.results_dir, "linear", timestamp)
    ensure_dir(out_dir)

    metrics = evaluate(model)
    metrics.to_csv(os.path.join(out_dir, "metrics.csv"), index=False)
    print(metrics.to_string(index=False))

    estimator = model.estimator
    pd.DataFrame({"cost": estimator.cost_history}).to_csv(os.path.join(out_dir, "cost_history.csv"), index=False)
    plot_training_history(
        estimator.cost_history,
        estimator.coef_history,
        ["intercept", *X.columns],
        os.path.join(out_dir, "training.png"),
        f"Linear Regression (lr={settings.learning_rate})",
    )

    if args.compare:
        comparison, coef = compare_with_sklearn(model)
        comparison.to_csv(os.path.join(out_dir, "comparison.csv"), index=False)
        coef.to_csv(os.path.join(out_dir, "coefficients.csv"), index=False)
        print(comparison.to_string(index=False))

    if args.predict:
        item = parse_item(args.predict)
        print(f"Prediction for {item}: {model.predict(item):.6f}")

    print(f"Saved results to: {out_dir}")


if __name__ == "__main__":
    main()

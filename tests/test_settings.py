import json

import pytest

from gdregress.cost_monitor import NotificationMode
from gdregress.errors import InvalidInputError
from gdregress.preprocessor import NormalizationStyle
from gdregress.settings import Settings, load_settings, parse_split
from gdregress.split_policy import SplitKind, SplitPolicy, SplitSizes


def test_defaults():
    settings = Settings()

    assert settings.learning_rate == 0.01
    assert settings.convergence_delta == 1e-6
    assert settings.max_iterations == 1500
    assert settings.scale_and_normalize is True
    assert settings.split == SplitPolicy.default()
    assert settings.normalization is NormalizationStyle.STANDARD
    assert settings.notification_mode is NotificationMode.RAISE
    assert settings.use_normal_equation is False


def test_load_settings_from_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "learning_rate": 0.1,
                "max_iterations": 400,
                "split": [2, 1, 0],
                "normalization": "range",
                "notification_mode": "LOG",
            }
        ),
        encoding="utf-8",
    )
    settings = load_settings(str(path))

    assert settings.learning_rate == 0.1
    assert settings.max_iterations == 400
    assert settings.split.kind is SplitKind.CUSTOM
    assert settings.split.sizes == SplitSizes(2, 1, 0)
    assert settings.normalization is NormalizationStyle.RANGE
    assert settings.notification_mode is NotificationMode.LOG


def test_unknown_setting_is_rejected():
    with pytest.raises(InvalidInputError, match="Unknown settings"):
        Settings.from_dict({"learning_rte": 0.1})


def test_unknown_enum_value_is_rejected():
    with pytest.raises(InvalidInputError, match="NormalizationStyle"):
        Settings.from_dict({"normalization": "minmax"})


@pytest.mark.parametrize(
    "value, expected",
    [
        ("default", SplitPolicy.default()),
        ("none", SplitPolicy.no_split()),
        ([60, 15, 15], SplitPolicy.custom(60, 15, 15)),
    ],
)
def test_parse_split(value, expected):
    assert parse_split(value) == expected


@pytest.mark.parametrize("value", ["custom", [1, 2], "halves"])
def test_parse_split_rejects_bad_values(value):
    with pytest.raises(InvalidInputError):
        parse_split(value)

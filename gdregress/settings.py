from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any

from gdregress.cost_monitor import DEFAULT_CONVERGENCE_DELTA, NotificationMode
from gdregress.errors import InvalidInputError
from gdregress.preprocessor import NormalizationStyle
from gdregress.split_policy import SplitKind, SplitPolicy

DEFAULT_CONFIG = "config/settings.json"


@dataclass
class Settings:
    """Construction-time options of an algorithm."""

    learning_rate: float = 0.01
    convergence_delta: float = DEFAULT_CONVERGENCE_DELTA
    max_iterations: int = 1500
    scale_and_normalize: bool = True
    split: SplitPolicy = field(default_factory=SplitPolicy.default)
    normalization: NormalizationStyle = NormalizationStyle.STANDARD
    notification_mode: NotificationMode = NotificationMode.RAISE
    use_normal_equation: bool = False

    @classmethod
    def from_dict(cls, config: dict) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise InvalidInputError(f"Unknown settings: {sorted(unknown)}")

        values: dict[str, Any] = dict(config)
        if "split" in values:
            values["split"] = parse_split(values["split"])
        if "normalization" in values:
            values["normalization"] = _parse_enum(NormalizationStyle, values["normalization"])
        if "notification_mode" in values:
            values["notification_mode"] = _parse_enum(NotificationMode, values["notification_mode"])
        return cls(**values)


def parse_split(value: Any) -> SplitPolicy:
    """Accepts "default", "none" or an explicit [training, cross_validation, test] triple."""
    if isinstance(value, SplitPolicy):
        return value
    if isinstance(value, (list, tuple)):
        if len(value) != 3:
            raise InvalidInputError(f"Expected three split sizes, received {value}.")
        return SplitPolicy.custom(*(int(size) for size in value))
    kind = _parse_enum(SplitKind, value)
    if kind is SplitKind.CUSTOM:
        raise InvalidInputError("Custom split requires explicit training/cross-validation/test sizes.")
    return SplitPolicy(kind)


def _parse_enum(enum_cls, value: Any):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError as exc:
        choices = [member.value for member in enum_cls]
        raise InvalidInputError(f"Unexpected {enum_cls.__name__} value {value!r}, expected one of {choices}.", exc) from exc


def load_settings(config_path: str = DEFAULT_CONFIG) -> Settings:
    with open(config_path, "r", encoding="utf-8") as handle:
        return Settings.from_dict(json.load(handle))

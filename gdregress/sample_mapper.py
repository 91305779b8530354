"""Turns labeled sample objects into numeric matrices.

Features are read through a schema: an ordered list of feature names plus a
way to pull the corresponding values out of one sample. Text values are
mapped through a stable CRC-32 hash so that the same string yields the same
number at training and at prediction time.
"""
from __future__ import annotations

import zlib
from dataclasses import fields, is_dataclass
from itertools import islice
from typing import Any, Iterable, Mapping, Protocol, Sequence

import numpy as np
import pandas as pd

from gdregress.errors import InvalidInputError
from gdregress.logs import Logger, get_logger

_LOGGER = get_logger(__name__)


class FeatureSchema(Protocol):
    def feature_names(self) -> tuple[str, ...]:
        ...

    def feature_values(self, sample: Any) -> list[Any]:
        ...


class FieldSchema:
    """Reads named fields from attribute-bearing objects or mappings."""

    def __init__(self, names: Sequence[str]) -> None:
        if not names:
            raise InvalidInputError("Empty list of features received.")
        self._names = tuple(names)

    def feature_names(self) -> tuple[str, ...]:
        return self._names

    def feature_values(self, sample: Any) -> list[Any]:
        try:
            if isinstance(sample, Mapping):
                return [sample[name] for name in self._names]
            return [getattr(sample, name) for name in self._names]
        except (KeyError, AttributeError) as exc:
            raise InvalidInputError(
                f"Sample {sample!r} does not expose the features {list(self._names)}.", exc
            ) from exc

    def __repr__(self) -> str:
        return f"FieldSchema({list(self._names)})"


def infer_schema(sample: Any) -> FieldSchema:
    """Derive the feature set from one sample, in declaration order."""
    if sample is None:
        raise InvalidInputError("Cannot derive features from a null sample.")
    if isinstance(sample, Mapping):
        names = [str(key) for key in sample.keys()]
    elif is_dataclass(sample) and not isinstance(sample, type):
        names = [field.name for field in fields(sample)]
    elif isinstance(sample, tuple) and hasattr(sample, "_fields"):
        names = list(sample._fields)
    else:
        names = _public_members(sample)
        if not names and not hasattr(sample, "__dict__") and not hasattr(type(sample), "__slots__"):
            raise InvalidInputError(f"Cannot derive features from {type(sample).__name__}.")
    return FieldSchema(names)


def _public_members(sample: Any) -> list[str]:
    """Public properties, slots and instance attributes, base classes first."""
    names: list[str] = []
    for cls in reversed(type(sample).__mro__):
        for name, member in vars(cls).items():
            if isinstance(member, property):
                names.append(name)
        slots = vars(cls).get("__slots__", ())
        names.extend([slots] if isinstance(slots, str) else slots)
    for name, value in getattr(sample, "__dict__", {}).items():
        if not callable(value):
            names.append(name)
    public = [name for name in names if not name.startswith("_")]
    return list(dict.fromkeys(public))


def schema_for(samples: Any) -> FieldSchema:
    if isinstance(samples, pd.DataFrame):
        return FieldSchema([str(column) for column in samples.columns])
    for sample in samples:
        return infer_schema(sample)
    raise InvalidInputError("Empty list of samples received.")


def as_records(samples: Any) -> Iterable[Any]:
    """DataFrames are iterated row by row as mappings; anything else as is."""
    if isinstance(samples, pd.DataFrame):
        return samples.to_dict(orient="records")
    return samples


def text_hash(text: str) -> int:
    """CRC-32 of the UTF-8 bytes, as a signed 32-bit integer."""
    value = zlib.crc32(text.encode("utf-8"))
    return value - (1 << 32) if value >= (1 << 31) else value


def _is_null(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, (float, np.floating)) and bool(np.isnan(value))


def to_number(value: Any, logger: Logger | None = None) -> float:
    if _is_null(value):
        raise InvalidInputError("Null values are not supported - all features must have a value.")
    if isinstance(value, str):
        return float(text_hash(value))
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        (logger or _LOGGER).warning(f"Failed to convert {value!r} to a number, going to assign 0 and continue.", exc)
        return 0.0


def to_label(value: Any, logger: Logger | None = None) -> float:
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return float(text_hash(value))
    if _is_null(value):
        raise InvalidInputError("Null labels are not supported - every sample needs a label.")
    return to_number(value, logger)


def _window(items: Iterable[Any], skip: int, take: int | None) -> Iterable[Any]:
    if skip < 0 or (take is not None and take < 0):
        raise InvalidInputError(f"Invalid window skip={skip}, take={take}.")
    stop = None if take is None else skip + take
    return islice(items, skip, stop)


def to_matrix(
    samples: Any,
    schema: FeatureSchema | None = None,
    skip: int = 0,
    take: int | None = None,
    logger: Logger | None = None,
) -> np.ndarray:
    """Convert ``take`` samples after the first ``skip`` into a float matrix.

    Args:
        samples: Sample objects, mappings or a DataFrame.
        schema: Feature schema; derived from the first sample when omitted.
        skip: Number of samples to skip before converting.
        take: Number of samples to convert; ``None`` converts the rest.

    Returns:
        Array with shape (rows, n_features).
    """
    logger = logger or _LOGGER
    if schema is None:
        if not isinstance(samples, pd.DataFrame):
            samples = list(samples)
        schema = schema_for(samples)
    names = schema.feature_names()

    rows = [
        [to_number(value, logger) for value in schema.feature_values(sample)]
        for sample in _window(as_records(samples), skip, take)
    ]
    matrix = np.array(rows, dtype=float).reshape(len(rows), len(names))

    if logger.is_enabled("DEBUG"):
        logger.debug(f"Converted samples to a {matrix.shape[0]}x{matrix.shape[1]} matrix, features={list(names)}.")
    return matrix


def to_vector(
    labels: Iterable[Any],
    skip: int = 0,
    take: int | None = None,
    logger: Logger | None = None,
) -> np.ndarray:
    """Convert ``take`` labels after the first ``skip`` into a float vector."""
    logger = logger or _LOGGER
    if isinstance(labels, (pd.Series, pd.DataFrame)):
        labels = np.asarray(labels).ravel().tolist()
    vector = np.array([to_label(value, logger) for value in _window(labels, skip, take)], dtype=float)

    if logger.is_enabled("DEBUG"):
        logger.debug(f"Converted labels to a vector of {vector.shape[0]} values.")
    return vector


def prepend_ones_column(matrix: np.ndarray) -> np.ndarray:
    """Prepend a bias column of ones.

        | 21 22 |          | 1 21 22 |
        | 31 32 |   --->   | 1 31 32 |
        | 41 42 |          | 1 41 42 |
    """
    matrix = np.asarray(matrix, dtype=float)
    return np.hstack([np.ones((matrix.shape[0], 1)), matrix])

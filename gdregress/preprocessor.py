from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from gdregress.errors import InvalidInputError
from gdregress.logs import Logger, get_logger
from gdregress.partition import Partition
from gdregress.sample_mapper import FeatureSchema, schema_for, to_matrix, to_vector
from gdregress.split_policy import SplitPolicy, SplitSizes


class NormalizationStyle(Enum):
    STANDARD = "standard"
    RANGE = "range"


@dataclass(frozen=True, eq=False)
class FeatureStatistics:
    """Per-feature statistics learned once over the training-time samples.

    STANDARD scaling: (x - mean) / std, with the sample standard deviation.
    RANGE scaling:    (x - mean) / (max - min).
    A zero scale (constant feature) is replaced by 1.
    """

    names: tuple[str, ...]
    minimum: np.ndarray
    maximum: np.ndarray
    mean: np.ndarray
    std: np.ndarray

    @classmethod
    def from_matrix(cls, names: tuple[str, ...], matrix: np.ndarray) -> "FeatureStatistics":
        n_samples = matrix.shape[0]
        mean = matrix.mean(axis=0)
        # two-pass: mean first, then the squared deviations around it
        if n_samples > 1:
            std = np.sqrt(((matrix - mean) ** 2).sum(axis=0) / (n_samples - 1))
        else:
            std = np.zeros(matrix.shape[1])
        stats = cls(
            names=tuple(names),
            minimum=matrix.min(axis=0),
            maximum=matrix.max(axis=0),
            mean=mean,
            std=std,
        )
        for array in (stats.minimum, stats.maximum, stats.mean, stats.std):
            array.setflags(write=False)
        return stats

    def scale(self, style: NormalizationStyle) -> np.ndarray:
        if style is NormalizationStyle.STANDARD:
            spread = self.std
        elif style is NormalizationStyle.RANGE:
            spread = self.maximum - self.minimum
        else:
            raise InvalidInputError(f"Unexpected normalization style: {style}")
        return np.where(spread == 0, 1.0, spread)

    def apply(self, matrix: np.ndarray, style: NormalizationStyle) -> np.ndarray:
        return (matrix - self.mean) / self.scale(style)


class Preprocessor:
    """Converts samples and labels into training, cross-validation and test sets.

    If required, applies feature scaling and mean normalization. The
    statistics are computed once, in ``run``, and reused by
    ``transform_single`` so that prediction inputs are scaled exactly like
    the training data.
    """

    def __init__(
        self,
        scale_and_normalize: bool = True,
        style: NormalizationStyle = NormalizationStyle.STANDARD,
        schema: FeatureSchema | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.scale_and_normalize = scale_and_normalize
        self.style = style
        self.logger = logger or get_logger(__name__)
        self._schema = schema
        self._statistics: FeatureStatistics | None = None
        self._split_sizes: SplitSizes | None = None

        self.training_set = Partition.empty()
        self.cross_validation_set = Partition.empty()
        self.test_set = Partition.empty()

    @property
    def schema(self) -> FeatureSchema | None:
        return self._schema

    @property
    def statistics(self) -> FeatureStatistics | None:
        return self._statistics

    @property
    def split_sizes(self) -> SplitSizes | None:
        return self._split_sizes

    def run(self, samples: Any, labels: Any, split_policy: SplitPolicy | None = None) -> None:
        split_policy = split_policy or SplitPolicy.default()
        samples = _materialize(samples)
        labels = _materialize(labels)

        samples_count, labels_count = len(samples), len(labels)
        if samples_count != labels_count:
            raise InvalidInputError(
                "The same number of labels and samples expected, but received "
                f"{samples_count} samples and {labels_count} labels."
            )
        if samples_count == 0:
            raise InvalidInputError("Empty list of samples received.")

        if self._schema is None:
            self._schema = schema_for(samples)

        matrix = to_matrix(samples, self._schema, logger=self.logger)
        vector = to_vector(labels, logger=self.logger)

        self._statistics = FeatureStatistics.from_matrix(self._schema.feature_names(), matrix)
        if self.scale_and_normalize:
            matrix = self._statistics.apply(matrix, self.style)

        sizes = split_policy.compute_sizes(samples_count)
        self._split_sizes = sizes
        self.training_set = Partition.from_arrays(matrix, vector, 0, sizes.training)
        self.cross_validation_set = Partition.from_arrays(matrix, vector, sizes.training, sizes.cross_validation)
        self.test_set = Partition.from_arrays(
            matrix, vector, sizes.training + sizes.cross_validation, sizes.test
        )
        self.logger.info(
            f"Preprocessed {samples_count} samples with {matrix.shape[1]} features: "
            f"training={sizes.training}, cross_validation={sizes.cross_validation}, test={sizes.test}."
        )

    def transform_single(self, sample: Any, label: Any = 0.0) -> Partition:
        """Scale one new sample with the statistics learned in ``run``."""
        if self._statistics is None:
            raise InvalidInputError("Preprocessor has not been run yet; no feature statistics available.")

        matrix = to_matrix([sample], self._schema, logger=self.logger)
        vector = to_vector([label], logger=self.logger)
        if self.scale_and_normalize:
            matrix = self._statistics.apply(matrix, self.style)
        return Partition.from_arrays(matrix, vector, 0, 1)


def _materialize(items: Any) -> Any:
    if hasattr(items, "__len__") and hasattr(items, "__getitem__"):
        return items
    return list(items)

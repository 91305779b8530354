from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gdregress.sample_mapper import prepend_ones_column


@dataclass(frozen=True, eq=False)
class Partition:
    """Training, cross-validation or test set.

    X holds one sample per row with a leading column of ones, so that theta0
    is treated as just another feature. Y is the matching column vector.
    Both are None when the partition has no samples.
    """

    X: np.ndarray | None = None
    Y: np.ndarray | None = None

    @classmethod
    def empty(cls) -> "Partition":
        return cls(None, None)

    @classmethod
    def from_arrays(cls, x: np.ndarray, y: np.ndarray, skip: int = 0, take: int | None = None) -> "Partition":
        """Carve rows [skip, skip + take) out of a feature matrix and label vector.

        Args:
            x: Feature matrix without the bias column, shape (n_samples, n_features).
            y: Labels with shape (n_samples,).
        """
        if take is None:
            take = x.shape[0] - skip
        if take == 0:
            return cls.empty()

        features = prepend_ones_column(x[skip:skip + take])
        labels = np.array(y[skip:skip + take], dtype=float).reshape(-1, 1)
        features.setflags(write=False)
        labels.setflags(write=False)
        return cls(features, labels)

    @property
    def is_empty(self) -> bool:
        return self.X is None

    @property
    def features_count(self) -> int:
        return 0 if self.X is None else self.X.shape[1]

    @property
    def samples_count(self) -> int:
        return 0 if self.X is None else self.X.shape[0]

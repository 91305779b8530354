"""Shared lifecycle of every algorithm: preprocess, analyze once, predict.

An algorithm plugs in as an ``Estimator``; ``Model`` composes it with a
preprocessor that owns the dataset partitions and the feature statistics.
Not thread-safe: do not call ``analyze``/``predict`` concurrently on one
instance.
"""
from __future__ import annotations

from typing import Any, Iterable, Protocol

from gdregress.linear_regression import LinearRegression
from gdregress.logs import Logger, get_logger
from gdregress.partition import Partition
from gdregress.preprocessor import Preprocessor
from gdregress.sample_mapper import FeatureSchema
from gdregress.settings import Settings


class Estimator(Protocol):
    def analyze(self, partition: Partition) -> Any:
        ...

    def predict(self, item: Partition) -> float:
        ...


class Model:
    """Binds an estimator to a preprocessed dataset.

    Args:
        estimator: Algorithm implementing ``analyze`` and ``predict``.
        samples: Feature-bearing objects, mappings or a DataFrame; one per row.
        labels: Label for each sample.
        settings: Split, scaling and optimizer options.
        schema: Explicit feature schema; inferred from the first sample when omitted.
    """

    def __init__(
        self,
        estimator: Estimator,
        samples: Any,
        labels: Any,
        settings: Settings | None = None,
        schema: FeatureSchema | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.estimator = estimator
        self.settings = settings or Settings()
        self.logger = logger or get_logger(__name__)
        self.preprocessor = Preprocessor(
            scale_and_normalize=self.settings.scale_and_normalize,
            style=self.settings.normalization,
            schema=schema,
            logger=self.logger,
        )
        self.preprocessor.run(samples, labels, self.settings.split)
        self._analysis_done = False

    @property
    def training_set(self) -> Partition:
        return self.preprocessor.training_set

    @property
    def cross_validation_set(self) -> Partition:
        return self.preprocessor.cross_validation_set

    @property
    def test_set(self) -> Partition:
        return self.preprocessor.test_set

    @property
    def is_trained(self) -> bool:
        return self._analysis_done

    def analyze(self) -> None:
        """Train on the training set. Runs once; later calls do nothing."""
        if self._analysis_done:
            return
        self.estimator.analyze(self.training_set)
        self._analysis_done = True

    def predict(self, item: Any) -> float:
        self.analyze()
        return self.estimator.predict(self.preprocessor.transform_single(item))

    def predict_many(self, items: Iterable[Any]) -> list[float]:
        return [self.predict(item) for item in items]


def linear_regression(
    samples: Any,
    labels: Any,
    settings: Settings | None = None,
    schema: FeatureSchema | None = None,
    logger: Logger | None = None,
) -> Model:
    settings = settings or Settings()
    return Model(LinearRegression(settings, logger), samples, labels, settings, schema, logger)

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gdregress.errors import InvalidInputError


class SplitKind(Enum):
    DEFAULT = "default"
    CUSTOM = "custom"
    NONE = "none"


@dataclass(frozen=True)
class SplitSizes:
    training: int
    cross_validation: int
    test: int

    @property
    def total(self) -> int:
        return self.training + self.cross_validation + self.test


class SplitPolicy:
    """Decides how many rows go to training, cross-validation and test.

    DEFAULT: about two thirds for training, the remainder split roughly in
    half between cross-validation and test.
    NONE: everything goes to training.
    CUSTOM: the caller supplies the three sizes, which must add up to the
    total sample count.
    """

    def __init__(self, kind: SplitKind = SplitKind.DEFAULT, sizes: SplitSizes | None = None) -> None:
        if kind is SplitKind.CUSTOM and sizes is None:
            raise InvalidInputError("Custom split requires explicit training/cross-validation/test sizes.")
        self.kind = kind
        self.sizes = sizes

    @classmethod
    def default(cls) -> "SplitPolicy":
        return cls(SplitKind.DEFAULT)

    @classmethod
    def no_split(cls) -> "SplitPolicy":
        return cls(SplitKind.NONE)

    @classmethod
    def custom(cls, training: int, cross_validation: int, test: int) -> "SplitPolicy":
        return cls(SplitKind.CUSTOM, SplitSizes(training, cross_validation, test))

    def compute_sizes(self, total: int) -> SplitSizes:
        if total < 0:
            raise InvalidInputError(f"Sample count must not be negative, received {total}.")

        if self.kind is SplitKind.NONE:
            return SplitSizes(total, 0, 0)

        if self.kind is SplitKind.DEFAULT:
            # ceil(2N/3) and ceil(N/6) in integer arithmetic
            training = -(-2 * total // 3)
            cross_validation = min(-(-total // 6), total - training)
            return SplitSizes(training, cross_validation, total - training - cross_validation)

        if self.kind is SplitKind.CUSTOM:
            sizes = self.sizes
            if min(sizes.training, sizes.cross_validation, sizes.test) < 0:
                raise InvalidInputError(f"Split sizes must not be negative, received {sizes}.")
            if sizes.total != total:
                raise InvalidInputError(
                    f"Split sizes add up to {sizes.total}, but the dataset has {total} samples."
                )
            return sizes

        raise InvalidInputError(f"Unexpected split type: {self.kind}")

    def __repr__(self) -> str:
        if self.sizes is None:
            return f"SplitPolicy({self.kind.name})"
        return f"SplitPolicy({self.kind.name}, {self.sizes})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SplitPolicy):
            return NotImplemented
        return self.kind is other.kind and self.sizes == other.sizes

    def __hash__(self) -> int:
        return hash((self.kind, self.sizes))

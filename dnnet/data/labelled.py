"""Labelled and unlabelled dataset containers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from ..core.errors import DimensionMismatch
from ..core.types import Array, LabelledDataPoint
from .collection import LocalCollection, ParallelCollection


def _as_rows(values: Array, name: str) -> Array:
    array = np.asarray(values, dtype=np.float64)
    if array.ndim == 1:
        array = array.reshape(-1, 1)
    if array.ndim != 2:
        raise DimensionMismatch(f"{name} must be 1-D or 2-D, got shape {array.shape}")
    return array


@dataclass(frozen=True)
class LabelledData:
    """A partitioned collection of :class:`LabelledDataPoint`."""

    data: ParallelCollection[LabelledDataPoint]

    @classmethod
    def from_points(
        cls,
        points: Iterable[LabelledDataPoint],
        *,
        num_partitions: int = 4,
        max_workers: int = 1,
    ) -> "LabelledData":
        return cls(LocalCollection(points, num_partitions=num_partitions, max_workers=max_workers))

    @classmethod
    def from_arrays(
        cls,
        features: Array,
        targets: Array,
        *,
        num_partitions: int = 4,
        max_workers: int = 1,
    ) -> "LabelledData":
        """Build a dataset from row-aligned ``features`` and ``targets``.

        1-D ``targets`` are treated as one target value per row.
        """

        features = _as_rows(features, "features")
        targets = _as_rows(targets, "targets")
        if features.shape[0] != targets.shape[0]:
            raise DimensionMismatch(
                f"features has {features.shape[0]} rows but targets has {targets.shape[0]}"
            )
        points = [LabelledDataPoint(x, y) for x, y in zip(features, targets)]
        return cls.from_points(points, num_partitions=num_partitions, max_workers=max_workers)

    def count(self) -> int:
        return self.data.count()

    def features(self) -> Array:
        return np.vstack([point.features for point in self.data.collect()])

    def targets(self) -> Array:
        return np.vstack([point.target for point in self.data.collect()])


@dataclass(frozen=True)
class UnlabelledData:
    """A partitioned collection of feature vectors."""

    data: ParallelCollection[Array]

    @classmethod
    def from_array(
        cls,
        features: Array,
        *,
        num_partitions: int = 4,
        max_workers: int = 1,
    ) -> "UnlabelledData":
        rows = [row.copy() for row in _as_rows(features, "features")]
        return cls(LocalCollection(rows, num_partitions=num_partitions, max_workers=max_workers))

    def count(self) -> int:
        return self.data.count()


__all__ = ["LabelledData", "UnlabelledData"]

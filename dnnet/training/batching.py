"""Epoch working sets and sequential mini-batch sampling."""

from __future__ import annotations

from typing import Iterator, TypeVar

import numpy as np

from ..data.collection import ParallelCollection

T = TypeVar("T")


def _next_seed(rng: np.random.Generator) -> int:
    return int(rng.integers(0, 2**31 - 1))


def epoch_working_set(
    data: ParallelCollection[T], rng: np.random.Generator
) -> ParallelCollection[T]:
    """Draw the epoch's working set with a full-fraction sample."""

    return data.sample(False, 1.0, seed=_next_seed(rng))


def mini_batches(
    working_set: ParallelCollection[T],
    num_batches: int,
    rng: np.random.Generator,
) -> Iterator[ParallelCollection[T]]:
    """Split ``working_set`` into ``num_batches`` batches without replacement.

    Batch ``i`` keeps a fraction ``1 / (num_batches - i)`` of the rows still in
    the pool, and those rows leave the pool before the next draw. The final
    fraction is 1, so the batches partition the working set exactly; their
    sizes vary because each row is kept independently.
    """

    pool = working_set
    for batch_index in range(num_batches):
        fraction = 1.0 / (num_batches - batch_index)
        batch = pool.sample(False, fraction, seed=_next_seed(rng))
        pool = pool.subtract(batch)
        yield batch


__all__ = ["epoch_working_set", "mini_batches"]

"""Partitioned collections with map/reduce and sampling.

The training loop only talks to the :class:`ParallelCollection` protocol, so a
distributed engine can be plugged in behind it. :class:`LocalCollection` is the
in-process backend: items are split into partitions and each partition is
mapped or reduced on a thread pool.
"""

from __future__ import annotations

import functools
import logging
from multiprocessing.pool import ThreadPool
from typing import Any, Callable, Generic, Iterable, List, Protocol, Sequence, TypeVar

import numpy as np

from ..core.errors import DistributedExecutionFailure, DnnetError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class ParallelCollection(Protocol[T]):
    """Capabilities the training loop needs from a dataset backend."""

    def count(self) -> int:
        """Return the number of elements."""

    def sample(
        self, with_replacement: bool, fraction: float, seed: int | None = None
    ) -> "ParallelCollection[T]":
        """Return a random sample containing about ``fraction`` of the elements."""

    def subtract(self, other: "ParallelCollection[T]") -> "ParallelCollection[T]":
        """Return the elements not present in ``other``."""

    def cache(self) -> "ParallelCollection[T]":
        """Keep the elements materialised for repeated passes."""

    def map(self, fn: Callable[[T], U]) -> "ParallelCollection[U]":
        """Apply ``fn`` to every element."""

    def reduce(self, fn: Callable[[T, T], T]) -> T:
        """Combine all elements with an associative, commutative ``fn``."""

    def collect(self) -> List[T]:
        """Return every element as a list."""


class LocalCollection(Generic[T]):
    """Thread-pool backed :class:`ParallelCollection`.

    Parameters
    ----------
    items:
        Elements of the collection. They are not copied.
    num_partitions:
        Number of slices the elements are split into for ``map`` and
        ``reduce``.
    max_workers:
        Threads used to process partitions. ``1`` processes them inline.

    ``subtract`` compares elements by identity, so subtracting a sample from
    the collection it was drawn from yields its exact complement.
    """

    def __init__(
        self,
        items: Iterable[T],
        num_partitions: int = 4,
        max_workers: int = 1,
    ) -> None:
        if num_partitions < 1:
            raise ValueError(f"num_partitions must be positive, got {num_partitions}")
        if max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self._items: List[T] = list(items)
        self.num_partitions = num_partitions
        self.max_workers = max_workers
        self.is_cached = False

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(count={len(self._items)}, "
            f"num_partitions={self.num_partitions}, max_workers={self.max_workers})"
        )

    def _derive(self, items: Iterable[U]) -> "LocalCollection[U]":
        return LocalCollection(items, num_partitions=self.num_partitions, max_workers=self.max_workers)

    def partitions(self) -> List[List[T]]:
        splits = np.array_split(np.arange(len(self._items)), self.num_partitions)
        return [[self._items[i] for i in split] for split in splits if len(split)]

    def _run(self, task: Callable[[Sequence[T]], Any]) -> List[Any]:
        partitions = self.partitions()
        try:
            if self.max_workers == 1 or len(partitions) <= 1:
                return [task(part) for part in partitions]
            with ThreadPool(min(self.max_workers, len(partitions))) as pool:
                return pool.map(task, partitions)
        except DnnetError:
            raise
        except Exception as exc:
            logger.debug("Partition task failed", exc_info=True)
            raise DistributedExecutionFailure(
                f"Partition task failed: {type(exc).__name__}: {exc}"
            ) from exc

    def count(self) -> int:
        return len(self._items)

    def sample(
        self, with_replacement: bool, fraction: float, seed: int | None = None
    ) -> "LocalCollection[T]":
        """Bernoulli sampling without replacement, Poisson sampling with it.

        Each element is kept independently, so the sample size is only
        approximately ``fraction * count``; ``fraction >= 1`` without
        replacement keeps everything.
        """

        if fraction < 0:
            raise ValueError(f"fraction must be non-negative, got {fraction}")
        rng = np.random.default_rng(seed)
        if with_replacement:
            counts = rng.poisson(fraction, size=len(self._items))
            picked = [item for item, n in zip(self._items, counts) for _ in range(int(n))]
        else:
            mask = rng.random(len(self._items)) < fraction
            picked = [item for item, keep in zip(self._items, mask) if keep]
        return self._derive(picked)

    def subtract(self, other: ParallelCollection[T]) -> "LocalCollection[T]":
        removed = {id(item) for item in other.collect()}
        return self._derive(item for item in self._items if id(item) not in removed)

    def cache(self) -> "LocalCollection[T]":
        self.is_cached = True
        return self

    def map(self, fn: Callable[[T], U]) -> "LocalCollection[U]":
        results = self._run(lambda part: [fn(item) for item in part])
        return self._derive(item for part in results for item in part)

    def reduce(self, fn: Callable[[T, T], T]) -> T:
        if not self._items:
            raise ValueError("Cannot reduce an empty collection")
        partials = self._run(lambda part: functools.reduce(fn, part))
        try:
            return functools.reduce(fn, partials)
        except DnnetError:
            raise
        except Exception as exc:
            raise DistributedExecutionFailure(
                f"Final reduction failed: {type(exc).__name__}: {exc}"
            ) from exc

    def collect(self) -> List[T]:
        return list(self._items)


__all__ = ["ParallelCollection", "LocalCollection"]

"""Partitioned collection interface and its in-process implementation."""

from __future__ import annotations

import functools
import math
from types import MappingProxyType
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

from .parallel import parallel_map, resolve_workers


@runtime_checkable
class ParallelCollection(Protocol):
    """Partitioned collection supporting the operations the pipeline needs.

    Element-wise operations run independently per partition. ``reduce``,
    ``combine_by_key``, ``left_outer_join`` and ``sort_descending_by`` need
    every partition's output before they return, so they act as barriers.
    """

    @property
    def num_partitions(self) -> int:
        """Number of partitions."""

    def map(self, func: Callable) -> ParallelCollection:
        """Apply ``func`` to every element."""

    def flat_map(self, func: Callable) -> ParallelCollection:
        """Apply ``func`` to every element and flatten the returned iterables."""

    def filter(self, predicate: Callable) -> ParallelCollection:
        """Keep elements for which ``predicate`` is true."""

    def map_partitions(self, func: Callable) -> ParallelCollection:
        """Replace each partition by ``func(partition_iterable)``."""

    def map_values(self, func: Callable) -> ParallelCollection:
        """Apply ``func`` to the value of every ``(key, value)`` element."""

    def reduce(self, combine: Callable) -> Any:
        """Fold all elements with an associative, commutative ``combine``."""

    def count(self) -> int:
        """Number of elements."""

    def combine_by_key(self, seed: Callable, merge: Callable, combine: Callable) -> ParallelCollection:
        """Aggregate ``(key, value)`` elements into one ``(key, accumulator)`` per key."""

    def left_outer_join(self, other: ParallelCollection) -> ParallelCollection:
        """Join ``(key, left)`` with ``(key, right)`` into ``(key, (left, right or None))``."""

    def sort_descending_by(self, key: Callable) -> ParallelCollection:
        """Order all elements by ``key``, largest first."""

    def collect(self) -> list:
        """Materialize every element on the caller, in partition order."""


def combine_partials(combine, a, b):
    """Combine two partial results, treating ``None`` as the identity."""
    if a is None:
        return b
    if b is None:
        return a
    return combine(a, b)


def fold_partition(items, combine):
    """Fold one partition with ``combine``; ``None`` for an empty partition."""
    return functools.reduce(functools.partial(combine_partials, combine), items, None)


def combine_partition_by_key(items, seed, merge):
    """Build the partition-private ``{key: accumulator}`` map."""
    acc = {}
    for key, value in items:
        if key in acc:
            acc[key] = merge(acc[key], value)
        else:
            acc[key] = seed(value)
    return acc


def merge_keyed_partials(partials, combine):
    """Merge partition-private accumulator maps into one map."""
    merged = {}
    for partial in partials:
        for key, acc in partial.items():
            merged[key] = combine(merged[key], acc) if key in merged else acc
    return merged


def _map_partition(part, func):
    return [func(x) for x in part]


def _flat_map_partition(part, func):
    return [y for x in part for y in func(x)]


def _filter_partition(part, predicate):
    return [x for x in part if predicate(x)]


def apply_partition(part, func):
    """Run a partition-level function and materialize its output."""
    return list(func(iter(part)))


def map_value(func, item):
    """Apply ``func`` to the value of a ``(key, value)`` pair."""
    key, value = item
    return key, func(value)


def join_value(right, item):
    """Pair a ``(key, value)`` element with its match in ``right``, or ``None``."""
    key, value = item
    return key, (value, right.get(key))


class LocalCollection:
    """In-process :class:`ParallelCollection` backed by lists of partitions.

    Per-partition work runs through :func:`~geoheat.core.parallel.parallel_map`,
    so ``n_jobs > 1`` processes partitions on a thread pool. Partitions are
    never shared between workers; partial results only meet in the merge
    step on the calling thread.

    Parameters
    ----------
    partitions : iterable of iterables
        Elements grouped by partition.
    n_jobs : int, default 1
        Worker threads. ``-1`` uses all cores.
    """

    def __init__(self, partitions: Iterable[Iterable], n_jobs: int = 1):
        self._partitions = [list(p) for p in partitions] or [[]]
        self._n_jobs = n_jobs

    @classmethod
    def from_iterable(cls, items, n_partitions=None, n_jobs=1):
        """Split ``items`` into contiguous partitions.

        Parameters
        ----------
        items : iterable
            Elements of the collection.
        n_partitions : int or None, default None
            Number of partitions. Defaults to the number of workers.
        n_jobs : int, default 1
            Worker threads.

        Returns
        -------
        LocalCollection
            Collection preserving the input order across partitions.
        """
        items = list(items)
        if n_partitions is None:
            n_partitions = resolve_workers(n_jobs)
        if not items:
            return cls([[]], n_jobs=n_jobs)
        n_partitions = max(1, min(n_partitions, len(items)))
        size = math.ceil(len(items) / n_partitions)
        return cls([items[i : i + size] for i in range(0, len(items), size)], n_jobs=n_jobs)

    @property
    def num_partitions(self) -> int:
        return len(self._partitions)

    @property
    def partitions(self) -> list[list]:
        """Copy of the partition lists."""
        return [list(p) for p in self._partitions]

    def _run(self, func, *args):
        return parallel_map(func, [(part, *args) for part in self._partitions], n_jobs=self._n_jobs)

    def _derive(self, partitions):
        return LocalCollection(partitions, n_jobs=self._n_jobs)

    def map(self, func):
        return self._derive(self._run(_map_partition, func))

    def flat_map(self, func):
        return self._derive(self._run(_flat_map_partition, func))

    def filter(self, predicate):
        return self._derive(self._run(_filter_partition, predicate))

    def map_partitions(self, func):
        return self._derive(self._run(apply_partition, func))

    def map_values(self, func):
        return self.map(functools.partial(map_value, func))

    def reduce(self, combine):
        partials = self._run(fold_partition, combine)
        return fold_partition(partials, combine)

    def count(self):
        return sum(len(p) for p in self._partitions)

    def combine_by_key(self, seed, merge, combine):
        partials = self._run(combine_partition_by_key, seed, merge)
        merged = merge_keyed_partials(partials, combine)
        n = self.num_partitions
        partitions = [[] for _ in range(n)]
        for key, acc in merged.items():
            partitions[hash(key) % n].append((key, acc))
        return self._derive(partitions)

    def left_outer_join(self, other):
        right = MappingProxyType(dict(other.collect()))
        return self.map(functools.partial(join_value, right))

    def sort_descending_by(self, key):
        return self._derive([sorted(self.collect(), key=key, reverse=True)])

    def collect(self):
        return [x for part in self._partitions for x in part]

    def __repr__(self):
        return f"LocalCollection(num_partitions={self.num_partitions}, n_jobs={self._n_jobs})"

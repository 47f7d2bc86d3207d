"""Dask Bag implementation of the partitioned collection interface."""

from __future__ import annotations

import functools
import math

from geoheat.core.collection import apply_partition, combine_partials, fold_partition, join_value, map_value
from geoheat.core.constants import DEFAULT_SPLIT_EVERY

from ._reduce import tree_reduce
from ._utils import get_default_partitions


def _fold_to_list(items, combine):
    return [fold_partition(items, combine)]


def _combine_singletons(combine, a, b):
    return [combine_partials(combine, a[0], b[0])]


def _fold_value(seed, merge, acc, item):
    value = item[1]
    return seed(value) if acc is None else merge(acc, value)


def _first(item):
    return item[0]


class DaskCollection:
    """:class:`~geoheat.core.collection.ParallelCollection` backed by a ``dask.bag.Bag``.

    Element-wise operations stay lazy on the bag. Reductions are computed
    on the cluster and tree-reduced over futures; the keyed combine uses
    :meth:`dask.bag.Bag.foldby`. Joins and sorts gather their inputs, which
    is where the pipeline synchronizes.

    Parameters
    ----------
    bag : dask.bag.Bag
        Underlying bag.
    client : distributed.Client
        Client used to compute results.
    split_every : int, default 8
        Fan-in of tree reductions.
    """

    def __init__(self, bag, client, split_every=DEFAULT_SPLIT_EVERY):
        self._bag = bag
        self._client = client
        self._split_every = split_every

    @classmethod
    def from_sequence(cls, items, client, npartitions=None, split_every=DEFAULT_SPLIT_EVERY):
        """Build a collection from an in-memory sequence.

        Parameters
        ----------
        items : iterable
            Elements of the collection.
        client : distributed.Client
            Dask distributed client.
        npartitions : int or None
            Number of partitions. Defaults to the cluster thread count.
        split_every : int, default 8
            Fan-in of tree reductions.
        """
        import dask.bag as db

        items = list(items)
        if npartitions is None:
            npartitions = get_default_partitions(client)
        partition_size = max(1, math.ceil(len(items) / max(npartitions, 1)))
        return cls(db.from_sequence(items, partition_size=partition_size), client, split_every)

    @property
    def bag(self):
        """Underlying ``dask.bag.Bag``."""
        return self._bag

    @property
    def num_partitions(self) -> int:
        return self._bag.npartitions

    def _derive(self, bag):
        return DaskCollection(bag, self._client, self._split_every)

    def map(self, func):
        return self._derive(self._bag.map(func))

    def flat_map(self, func):
        return self._derive(self._bag.map(func).flatten())

    def filter(self, predicate):
        return self._derive(self._bag.filter(predicate))

    def map_partitions(self, func):
        return self._derive(self._bag.map_partitions(apply_partition, func))

    def map_values(self, func):
        return self.map(functools.partial(map_value, func))

    def reduce(self, combine):
        partials = self._bag.map_partitions(_fold_to_list, combine)
        futures = self._client.compute(partials.to_delayed())
        result = tree_reduce(
            self._client,
            futures,
            functools.partial(_combine_singletons, combine),
            split_every=self._split_every,
        )
        return result[0]

    def count(self):
        return self._client.compute(self._bag.count()).result()

    def combine_by_key(self, seed, merge, combine):
        folded = self._bag.foldby(
            _first,
            functools.partial(_fold_value, seed, merge),
            None,
            combine=combine,
            split_every=self._split_every,
        )
        return self._derive(folded)

    def left_outer_join(self, other):
        right = dict(other.collect())
        return self.map(functools.partial(join_value, right))

    def sort_descending_by(self, key):
        items = sorted(self.collect(), key=key, reverse=True)
        return DaskCollection.from_sequence(items, self._client, npartitions=1, split_every=self._split_every)

    def collect(self):
        return list(self._client.compute(self._bag).result())

    def __repr__(self):
        return f"DaskCollection(num_partitions={self.num_partitions})"


def dask_collection(data, client, n_partitions=None, split_every=DEFAULT_SPLIT_EVERY):
    """Wrap a Dask Bag, or distribute an in-memory iterable, as a collection."""
    import dask.bag as db

    if isinstance(data, DaskCollection):
        return data
    if isinstance(data, db.Bag):
        return DaskCollection(data, client, split_every)
    return DaskCollection.from_sequence(data, client, npartitions=n_partitions, split_every=split_every)

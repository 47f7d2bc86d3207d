"""Spark RDD implementation of the partitioned collection interface."""

from __future__ import annotations

import functools

from geoheat.core.collection import apply_partition, combine_partials, fold_partition

from ._utils import get_default_partitions


def _fold_partition_to_list(combine, items):
    return [fold_partition(items, combine)]


def _apply_partition(func, items):
    return apply_partition(items, func)


class SparkCollection:
    """:class:`~geoheat.core.collection.ParallelCollection` backed by a ``pyspark.RDD``.

    Every operation maps onto its native RDD counterpart. Reductions fold
    each partition first and combine the partials with ``treeReduce``, so
    empty partitions and empty inputs reduce to ``None`` instead of raising.

    Parameters
    ----------
    rdd : pyspark.RDD
        Underlying RDD.
    depth : int, default 3
        Depth of the ``treeReduce`` combine tree.
    """

    def __init__(self, rdd, depth=3):
        self._rdd = rdd
        self._depth = depth

    @classmethod
    def from_sequence(cls, items, spark, n_partitions=None):
        """Distribute an in-memory sequence with ``SparkContext.parallelize``.

        Parameters
        ----------
        items : iterable
            Elements of the collection.
        spark : pyspark.sql.SparkSession
            Active Spark session.
        n_partitions : int or None
            Number of slices. Defaults to the default parallelism.
        """
        items = list(items)
        if n_partitions is None:
            n_partitions = get_default_partitions(spark)
        n_partitions = max(1, min(n_partitions, len(items) or 1))
        return cls(spark.sparkContext.parallelize(items, n_partitions))

    @property
    def rdd(self):
        """Underlying ``pyspark.RDD``."""
        return self._rdd

    @property
    def num_partitions(self) -> int:
        return self._rdd.getNumPartitions()

    def _derive(self, rdd):
        return SparkCollection(rdd, self._depth)

    def map(self, func):
        return self._derive(self._rdd.map(func))

    def flat_map(self, func):
        return self._derive(self._rdd.flatMap(func))

    def filter(self, predicate):
        return self._derive(self._rdd.filter(predicate))

    def map_partitions(self, func):
        return self._derive(self._rdd.mapPartitions(functools.partial(_apply_partition, func)))

    def map_values(self, func):
        return self._derive(self._rdd.mapValues(func))

    def reduce(self, combine):
        # treeReduce raises on an RDD without partitions, such as emptyRDD().
        if self._rdd.getNumPartitions() == 0:
            return None
        partials = self._rdd.mapPartitions(functools.partial(_fold_partition_to_list, combine))
        return partials.treeReduce(functools.partial(combine_partials, combine), depth=self._depth)

    def count(self):
        return self._rdd.count()

    def combine_by_key(self, seed, merge, combine):
        return self._derive(self._rdd.combineByKey(seed, merge, combine))

    def left_outer_join(self, other):
        return self._derive(self._rdd.leftOuterJoin(other.rdd))

    def sort_descending_by(self, key):
        return self._derive(self._rdd.sortBy(key, ascending=False, numPartitions=1))

    def collect(self):
        return self._rdd.collect()

    def __repr__(self):
        return f"SparkCollection(num_partitions={self.num_partitions})"


def spark_collection(data, spark, n_partitions=None):
    """Wrap an RDD, or parallelize an in-memory iterable, as a collection."""
    from pyspark import RDD

    if isinstance(data, SparkCollection):
        return data
    if isinstance(data, RDD):
        return SparkCollection(data)
    return SparkCollection.from_sequence(data, spark, n_partitions=n_partitions)

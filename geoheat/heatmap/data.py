"""Dataset configuration and backend dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from geoheat.core.collection import LocalCollection, ParallelCollection
from geoheat.core.constants import DEFAULT_N_JOBS, DEFAULT_SPLIT_EVERY
from geoheat.core.types import PartitionTile, Space
from geoheat.distributed import collection_extent, prepare_partition_table

log = logging.getLogger("geoheat.heatmap.data")


def uses_dask(data, client=None) -> bool:
    """True when ``data`` should run on the Dask backend."""
    from geoheat.dask._utils import is_dask_bag

    return client is not None or is_dask_bag(data)


def uses_spark(data, spark=None) -> bool:
    """True when ``data`` should run on the Spark backend."""
    from geoheat.spark._utils import is_spark_rdd

    return spark is not None or is_spark_rdd(data)


def as_collection(
    data,
    n_jobs=DEFAULT_N_JOBS,
    n_partitions=None,
    client=None,
    spark=None,
    split_every=DEFAULT_SPLIT_EVERY,
):
    """Wrap records in the :class:`ParallelCollection` of the matching backend.

    A Dask Bag or a ``client`` selects Dask, an RDD or a ``spark`` session
    selects Spark. Anything else is split into a thread-backed
    :class:`LocalCollection`.

    Parameters
    ----------
    data : iterable, ParallelCollection, dask.bag.Bag or pyspark.RDD
        Records to distribute.
    n_jobs : int, default 1
        Worker threads of the local backend.
    n_partitions : int or None
        Partition count for in-memory input.
    client : distributed.Client, optional
        Dask client.
    spark : pyspark.sql.SparkSession, optional
        Spark session.
    split_every : int, default 8
        Fan-in of Dask tree reductions.

    Returns
    -------
    ParallelCollection
    """
    if isinstance(data, ParallelCollection):
        return data

    if uses_dask(data, client):
        from geoheat.dask import dask_collection, get_or_create_client

        return dask_collection(data, get_or_create_client(client), n_partitions=n_partitions, split_every=split_every)

    if uses_spark(data, spark):
        from geoheat.spark import get_or_create_spark, spark_collection

        return spark_collection(data, get_or_create_spark(spark), n_partitions=n_partitions)

    return LocalCollection.from_iterable(data, n_partitions=n_partitions, n_jobs=n_jobs)


@dataclass
class DataConfig:
    """One dataset taking part in a heatmap run.

    Attributes
    ----------
    dataset_id : str
        Name of the dataset.
    records : Any
        Spatial records: an iterable, a Dask Bag, an RDD or a
        :class:`ParallelCollection`. One-shot iterators are materialized
        into a list so the dataset can be read more than once.
    geom_index : int or None
        Field of tab-delimited text records holding the WKT geometry.
        ``None`` treats each string as WKT.
    partition_table : tuple of PartitionTile or None
        Tiles over which results are reported.
    space : Space or None
        Extent of the dataset, set by :meth:`prepare`.
    record_count : int or None
        Number of raw records, valid or not, set by :meth:`prepare`.
    """

    dataset_id: str
    records: Any = field(repr=False)
    geom_index: int | None = None
    partition_table: tuple[PartitionTile, ...] | None = None
    space: Space | None = None
    record_count: int | None = None

    def __post_init__(self):
        if isinstance(self.records, Iterator):
            self.records = list(self.records)
        if self.geom_index is not None and (not isinstance(self.geom_index, int) or self.geom_index < 0):
            raise ValueError(f"geom_index={self.geom_index} is not valid. Must be a non-negative integer or None.")
        if self.partition_table is not None:
            self.partition_table = prepare_partition_table(self.partition_table)

    @property
    def is_prepared(self) -> bool:
        """True once :meth:`prepare` has computed the extent."""
        return self.space is not None

    @property
    def is_empty(self) -> bool:
        """True when the prepared extent holds no valid object."""
        return self.space is not None and self.space.object_count == 0

    def prepare(
        self,
        tiler=None,
        n_jobs=DEFAULT_N_JOBS,
        n_partitions=None,
        client=None,
        spark=None,
        split_every=DEFAULT_SPLIT_EVERY,
    ):
        """Compute the dataset extent and, optionally, its partition table.

        Every record is mapped to its bounding box, sentinel boxes are
        dropped, and the rest are reduced into a :class:`Space`.

        Parameters
        ----------
        tiler : callable, optional
            ``tiler(space) -> iterable of PartitionTile``. Builds the
            partition table from the computed extent. Skipped for an empty
            extent.
        n_jobs, n_partitions, client, spark, split_every
            Backend selection, see :func:`as_collection`.

        Returns
        -------
        DataConfig
            ``self``, for chaining.
        """
        collection = as_collection(
            self.records,
            n_jobs=n_jobs,
            n_partitions=n_partitions,
            client=client,
            spark=spark,
            split_every=split_every,
        )
        self.space, self.record_count = collection_extent(
            collection, geom_index=self.geom_index, dataset_id=self.dataset_id
        )
        log.info(
            "Prepared dataset '%s': %d of %d records with a valid geometry",
            self.dataset_id,
            self.space.object_count,
            self.record_count,
        )

        if tiler is not None and not self.is_empty:
            self.partition_table = prepare_partition_table(tiler(self.space))
        return self

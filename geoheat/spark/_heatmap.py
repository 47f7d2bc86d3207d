"""Entry points for distributed heatmap computation on Spark."""

from __future__ import annotations

import logging

from geoheat.distributed import collection_space, prepare_partition_table, tile_statistics

from ._collection import SparkCollection, spark_collection
from ._utils import get_default_partitions, get_or_create_spark

log = logging.getLogger("geoheat.spark.heatmap")


def spark_space(records, spark=None, geom_index=None, dataset_id=None, n_partitions=None):
    """Compute the extent of a dataset on Spark.

    Parameters
    ----------
    records : pyspark.RDD or iterable
        Spatial records (WKT text, :class:`SpatialObject` or WKB bytes).
    spark : pyspark.sql.SparkSession, optional
        Spark session. If None, the active session is used or a local one
        is created.
    geom_index : int, optional
        Geometry field of tab-delimited text records.
    dataset_id : str, optional
        Name used in the empty-extent warning.
    n_partitions : int, optional
        Slices for in-memory input. Defaults to the default parallelism.

    Returns
    -------
    Space
        Reduced extent of all valid records.
    """
    spark = get_or_create_spark(spark)
    collection = spark_collection(records, spark, n_partitions=n_partitions)
    log.info("spark_space: %d partitions", collection.num_partitions)
    return collection_space(collection, geom_index=geom_index, dataset_id=dataset_id)


def spark_heatmap(grouped_rows, partition_table, score_kind, spark=None, n_partitions=None, tie_break=True):
    r"""Compute ranked per-tile statistics on Spark.

    Rows are folded into ``(sum, n)`` accumulators with ``combineByKey``,
    left-outer-joined against the partition table with ``leftOuterJoin``
    and ordered with ``sortBy`` into a single partition.

    Users do not need to call this function directly. Passing an RDD or a
    ``spark`` session to :func:`~geoheat.heatmap` dispatches here.

    Parameters
    ----------
    grouped_rows : pyspark.RDD or iterable
        ``(tile_id, rows)`` pairs produced by the spatial join.
    partition_table : sequence of PartitionTile
        Tiles to report on.
    score_kind : ScoreKind or str
        Statistic to average per tile.
    spark : pyspark.sql.SparkSession, optional
        Spark session. If None, the active session is used or a local one
        is created.
    n_partitions : int, optional
        Slices for in-memory input. Defaults to the default parallelism.
    tie_break : bool, default True
        Order tiles with equal statistics by ascending tile id.

    Returns
    -------
    list of TileStatistic
        One entry per tile, non-increasing in ``statistic``.
    """
    spark = get_or_create_spark(spark)

    table = prepare_partition_table(partition_table)
    if n_partitions is None:
        n_partitions = get_default_partitions(spark)

    rows = spark_collection(grouped_rows, spark, n_partitions=n_partitions)
    tiles = SparkCollection.from_sequence(table, spark, n_partitions=n_partitions)
    log.info("spark_heatmap: %d row partitions, %d tiles", rows.num_partitions, len(table))
    return tile_statistics(rows, tiles, score_kind, tie_break=tie_break)

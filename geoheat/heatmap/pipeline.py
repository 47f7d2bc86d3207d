"""Heatmap pipeline for a pair of datasets."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, Protocol

from geoheat.core.collection import LocalCollection
from geoheat.core.config import HeatMapConfig
from geoheat.core.constants import DEFAULT_N_JOBS, DEFAULT_SPLIT_EVERY, Predicate
from geoheat.distributed import prepare_partition_table, tile_statistics

from .data import DataConfig, as_collection, uses_dask, uses_spark
from .results import HeatMapResult

log = logging.getLogger("geoheat.heatmap.pipeline")


class SpatialJoin(Protocol):
    """Spatial join producing score rows per tile.

    Called with both dataset configs and the join predicate. Returns
    ``(tile_id, rows)`` pairs where every row is a tab-delimited string (or
    a sequence of fields) whose trailing columns hold the scores. A Dask Bag
    or an RDD of such pairs runs the aggregation on that backend.
    """

    def __call__(self, config_a: DataConfig, config_b: DataConfig, predicate: Predicate) -> Iterable | Any: ...


class HeatMapPipeline:
    """Compose aggregation, join and ranking for dataset pairs.

    Parameters
    ----------
    spatial_join : SpatialJoin
        Producer of per-tile score rows.
    config : HeatMapConfig, optional
        Score kind, predicate and execution options.
    client : distributed.Client, optional
        Run on this Dask cluster.
    spark : pyspark.sql.SparkSession, optional
        Run on this Spark session.
    """

    def __init__(self, spatial_join, config=None, client=None, spark=None):
        if not callable(spatial_join):
            raise TypeError(f"spatial_join must be callable, not {type(spatial_join).__name__}.")
        self.spatial_join = spatial_join
        self.config = config if config is not None else HeatMapConfig()
        self.client = client
        self.spark = spark

    def _backend(self, grouped_rows):
        if uses_dask(grouped_rows, self.client):
            return "dask"
        if uses_spark(grouped_rows, self.spark):
            return "spark"
        return "local"

    def _statistics(self, cfg, backend, grouped_rows, partition_table):
        if backend == "dask":
            from geoheat.dask import dask_heatmap

            return dask_heatmap(
                grouped_rows,
                partition_table,
                cfg.score_kind,
                client=self.client,
                n_partitions=cfg.n_partitions,
                tie_break=cfg.tie_break,
                split_every=cfg.split_every,
            )

        if backend == "spark":
            from geoheat.spark import spark_heatmap

            return spark_heatmap(
                grouped_rows,
                partition_table,
                cfg.score_kind,
                spark=self.spark,
                n_partitions=cfg.n_partitions,
                tie_break=cfg.tie_break,
            )

        table = prepare_partition_table(partition_table)
        rows = as_collection(grouped_rows, n_jobs=cfg.n_jobs, n_partitions=cfg.n_partitions)
        tiles = LocalCollection.from_iterable(table, n_partitions=cfg.n_partitions, n_jobs=cfg.n_jobs)
        return tile_statistics(rows, tiles, cfg.score_kind, tie_break=cfg.tie_break)

    def run(self, config_a, config_b, predicate=None, score_kind=None, partition_table=None):
        """Compute the ranked tile statistics of one dataset pair.

        Parameters
        ----------
        config_a, config_b : DataConfig
            Datasets to join.
        predicate : Predicate or str, optional
            Overrides the configured predicate.
        score_kind : ScoreKind or str, optional
            Overrides the configured score kind.
        partition_table : sequence of PartitionTile, optional
            Tiles to report on. Defaults to ``config_a.partition_table``.

        Returns
        -------
        HeatMapResult
            Statistics for every tile, non-increasing in ``statistic``.

        Raises
        ------
        ValueError
            If no partition table is available.
        """
        overrides = {"predicate": predicate, "score_kind": score_kind}
        cfg = dataclasses.replace(self.config, **{k: v for k, v in overrides.items() if v is not None})

        if partition_table is None:
            partition_table = config_a.partition_table
        if partition_table is None:
            raise ValueError(
                f"No partition table for dataset '{config_a.dataset_id}'. "
                "Pass partition_table or prepare the dataset with a tiler."
            )

        grouped_rows = self.spatial_join(config_a, config_b, cfg.predicate)
        backend = self._backend(grouped_rows)
        log.info(
            "Heatmap %s x %s: predicate=%s score=%s backend=%s",
            config_a.dataset_id,
            config_b.dataset_id,
            cfg.predicate,
            cfg.score_kind,
            backend,
        )
        statistics = self._statistics(cfg, backend, grouped_rows, partition_table)

        return HeatMapResult(
            statistics=statistics,
            kind=str(cfg.score_kind),
            predicate=str(cfg.predicate),
            dataset_ids=(config_a.dataset_id, config_b.dataset_id),
            estimation_params={
                "backend": backend,
                "n_jobs": cfg.n_jobs,
                "n_partitions": cfg.n_partitions,
                "tie_break": cfg.tie_break,
            },
        )


def heatmap(
    config_a,
    config_b,
    spatial_join,
    predicate="intersects",
    score_kind="jaccard",
    partition_table=None,
    n_jobs=DEFAULT_N_JOBS,
    n_partitions=None,
    tie_break=True,
    split_every=DEFAULT_SPLIT_EVERY,
    client=None,
    spark=None,
):
    r"""Compute a tile heatmap for a pair of spatial datasets.

    The spatial join yields score rows per tile. For every tile the selected
    score is averaged,

    .. math::

        s_t = \frac{1}{n_t} \sum_{i=1}^{n_t} v_{t,i},

    and every tile of the partition table is reported exactly once, with
    :math:`s_t = 0` when the join produced no row for it. Tiles are returned
    in descending order of :math:`s_t`.

    Parameters
    ----------
    config_a, config_b : DataConfig
        Datasets to join.
    spatial_join : SpatialJoin
        Callable ``(config_a, config_b, predicate) -> (tile_id, rows)`` pairs.
    predicate : Predicate or str, default "intersects"
        Join predicate forwarded to ``spatial_join``.
    score_kind : ScoreKind or str, default "jaccard"
        Statistic to average per tile.
    partition_table : sequence of PartitionTile, optional
        Tiles to report on. Defaults to ``config_a.partition_table``.
    n_jobs : int, default 1
        Worker threads of the local backend. ``-1`` uses all cores.
    n_partitions : int, optional
        Partition count for in-memory input.
    tie_break : bool, default True
        Order tiles with equal statistics by ascending tile id.
    split_every : int, default 8
        Fan-in of Dask tree reductions.
    client : distributed.Client, optional
        Run on this Dask cluster. A Dask Bag returned by ``spatial_join``
        selects Dask as well.
    spark : pyspark.sql.SparkSession, optional
        Run on this Spark session. An RDD returned by ``spatial_join``
        selects Spark as well.

    Returns
    -------
    HeatMapResult
        Ranked statistics with run metadata.

    Raises
    ------
    ValueError
        On invalid options, a missing or duplicated partition table, or a
        malformed score row (:class:`~geoheat.distributed.ScoreRowError`).

    Examples
    --------
    .. ipython::

        In [1]: from geoheat import DataConfig, PartitionTile, heatmap
           ...:
           ...: tiles = [PartitionTile(1, 0, 0, 1, 1), PartitionTile(2, 1, 0, 2, 1)]
           ...: a = DataConfig("a", [], partition_table=tiles)
           ...: b = DataConfig("b", [])
           ...: join = lambda a, b, p: [(1, ["x\t5\t0.8", "y\t5\t0.6"])]
           ...: print(heatmap(a, b, join))
    """
    config = HeatMapConfig(
        score_kind=score_kind,
        predicate=predicate,
        n_jobs=n_jobs,
        n_partitions=n_partitions,
        tie_break=tie_break,
        split_every=split_every,
    )
    pipeline = HeatMapPipeline(spatial_join, config=config, client=client, spark=spark)
    return pipeline.run(config_a, config_b, partition_table=partition_table)

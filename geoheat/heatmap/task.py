"""Heatmaps for every pair of a group of datasets."""

from __future__ import annotations

import itertools
import logging
import warnings
from collections import Counter

from tqdm.auto import tqdm

from geoheat.core.config import HeatMapConfig
from geoheat.core.constants import DEFAULT_N_JOBS, DEFAULT_SPLIT_EVERY
from geoheat.core.parallel import parallel_map

from .pipeline import HeatMapPipeline

log = logging.getLogger("geoheat.heatmap.task")


def generate_pairs(n):
    """Return every index pair ``(i, j)`` with ``0 <= i < j < n``.

    Examples
    --------
    >>> generate_pairs(3)
    [(0, 1), (0, 2), (1, 2)]
    """
    if not isinstance(n, int) or n < 0:
        raise ValueError(f"n={n} is not valid. Must be a non-negative integer.")
    return list(itertools.combinations(range(n), 2))


def _prepare_dataset(config, tiler, n_partitions, client, spark, split_every):
    return config.prepare(
        tiler=tiler,
        n_jobs=1,
        n_partitions=n_partitions,
        client=client,
        spark=spark,
        split_every=split_every,
    )


def heatmap_task(
    datasets,
    spatial_join,
    predicate="intersects",
    score_kind="jaccard",
    tiler=None,
    n_jobs=DEFAULT_N_JOBS,
    n_partitions=None,
    tie_break=True,
    split_every=DEFAULT_SPLIT_EVERY,
    client=None,
    spark=None,
    progress_bar=False,
):
    """Compute heatmaps for every unordered pair of datasets.

    Datasets are prepared concurrently on ``n_jobs`` threads, then each pair
    ``(i, j)`` with ``i < j`` runs through :class:`HeatMapPipeline`. Pairs
    involving a dataset without any valid geometry are skipped with a
    ``UserWarning``.

    Parameters
    ----------
    datasets : sequence of DataConfig
        Datasets with unique ``dataset_id`` values. Unprepared datasets are
        prepared in place.
    spatial_join : SpatialJoin
        Producer of per-tile score rows.
    predicate : Predicate or str, default "intersects"
        Join predicate.
    score_kind : ScoreKind or str, default "jaccard"
        Statistic to average per tile.
    tiler : callable, optional
        ``tiler(space) -> iterable of PartitionTile`` used while preparing.
    n_jobs : int, default 1
        Worker threads for preparation and for the local backend.
    n_partitions : int, optional
        Partition count for in-memory input.
    tie_break : bool, default True
        Order tiles with equal statistics by ascending tile id.
    split_every : int, default 8
        Fan-in of Dask tree reductions.
    client : distributed.Client, optional
        Dask client.
    spark : pyspark.sql.SparkSession, optional
        Spark session.
    progress_bar : bool, default False
        Whether to display a tqdm progress bar over the pairs.

    Returns
    -------
    dict
        :class:`HeatMapResult` keyed by ``(dataset_id_a, dataset_id_b)``.
    """
    datasets = list(datasets)
    duplicated = [k for k, n in Counter(d.dataset_id for d in datasets).items() if n > 1]
    if duplicated:
        raise ValueError(f"dataset ids must be unique, found duplicates: {sorted(duplicated)}")

    config = HeatMapConfig(
        score_kind=score_kind,
        predicate=predicate,
        n_jobs=n_jobs,
        n_partitions=n_partitions,
        tie_break=tie_break,
        split_every=split_every,
    )

    pending = [d for d in datasets if not d.is_prepared]
    log.info("heatmap_task: preparing %d of %d datasets", len(pending), len(datasets))
    parallel_map(
        _prepare_dataset,
        [(d, tiler, n_partitions, client, spark, split_every) for d in pending],
        n_jobs=n_jobs,
    )

    pipeline = HeatMapPipeline(spatial_join, config=config, client=client, spark=spark)
    results = {}
    pairs = generate_pairs(len(datasets))
    for i, j in tqdm(pairs, desc="Pairs", unit="pair", disable=not progress_bar):
        a, b = datasets[i], datasets[j]
        empty = [d.dataset_id for d in (a, b) if d.is_empty]
        if empty:
            warnings.warn(
                f"Skipping pair ('{a.dataset_id}', '{b.dataset_id}'): no valid geometry in {empty}.",
                UserWarning,
                stacklevel=2,
            )
            continue
        results[(a.dataset_id, b.dataset_id)] = pipeline.run(a, b)
    return results

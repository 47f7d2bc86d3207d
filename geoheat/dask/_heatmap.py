"""Entry points for distributed heatmap computation on Dask."""

from __future__ import annotations

import logging

from geoheat.core.constants import DEFAULT_SPLIT_EVERY
from geoheat.distributed import collection_space, prepare_partition_table, tile_statistics

from ._collection import DaskCollection, dask_collection
from ._utils import get_default_partitions, get_or_create_client

log = logging.getLogger("geoheat.dask.heatmap")


def dask_space(
    records,
    client=None,
    geom_index=None,
    dataset_id=None,
    n_partitions=None,
    split_every=DEFAULT_SPLIT_EVERY,
):
    """Compute the extent of a dataset on a Dask cluster.

    Parameters
    ----------
    records : dask.bag.Bag or iterable
        Spatial records (WKT text, :class:`SpatialObject` or WKB bytes).
    client : distributed.Client, optional
        Dask distributed client. If None, a local client is created.
    geom_index : int, optional
        Geometry field of tab-delimited text records.
    dataset_id : str, optional
        Name used in the empty-extent warning.
    n_partitions : int, optional
        Partitions for in-memory input. Defaults to the cluster thread count.
    split_every : int, default 8
        Fan-in of the tree reduction.

    Returns
    -------
    Space
        Reduced extent of all valid records.
    """
    client = get_or_create_client(client)
    collection = dask_collection(records, client, n_partitions=n_partitions, split_every=split_every)
    log.info("dask_space: %d partitions", collection.num_partitions)
    return collection_space(collection, geom_index=geom_index, dataset_id=dataset_id)


def dask_heatmap(
    grouped_rows,
    partition_table,
    score_kind,
    client=None,
    n_partitions=None,
    tie_break=True,
    split_every=DEFAULT_SPLIT_EVERY,
):
    r"""Compute ranked per-tile statistics on a Dask cluster.

    Spatial join rows are parsed and folded into per-tile ``(sum, n)``
    accumulators partition by partition; the accumulators are merged with
    ``foldby``, joined against the partition table and sorted on the
    driver.

    Users do not need to call this function directly. Passing a Dask Bag
    or a ``client`` to :func:`~geoheat.heatmap` dispatches here.

    Parameters
    ----------
    grouped_rows : dask.bag.Bag or iterable
        ``(tile_id, rows)`` pairs produced by the spatial join.
    partition_table : sequence of PartitionTile
        Tiles to report on.
    score_kind : ScoreKind or str
        Statistic to average per tile.
    client : distributed.Client, optional
        Dask distributed client. If None, a local client is created.
    n_partitions : int, optional
        Partitions for in-memory input. Defaults to the cluster thread count.
    tie_break : bool, default True
        Order tiles with equal statistics by ascending tile id.
    split_every : int, default 8
        Fan-in of tree reductions.

    Returns
    -------
    list of TileStatistic
        One entry per tile, non-increasing in ``statistic``.
    """
    client = get_or_create_client(client)
    logging.getLogger("distributed.shuffle").setLevel(logging.ERROR)

    table = prepare_partition_table(partition_table)
    if n_partitions is None:
        n_partitions = get_default_partitions(client)

    rows = dask_collection(grouped_rows, client, n_partitions=n_partitions, split_every=split_every)
    tiles = DaskCollection.from_sequence(table, client, npartitions=n_partitions, split_every=split_every)
    log.info("dask_heatmap: %d row partitions, %d tiles", rows.num_partitions, len(table))
    return tile_statistics(rows, tiles, score_kind, tie_break=tie_break)

"""Aggregate, join and rank composed over partitioned collections."""

from __future__ import annotations

import logging

from ._join import collection_join
from ._rank import collection_rank
from ._scores import collection_tile_averages

log = logging.getLogger("geoheat.distributed.pipeline")


def tile_statistics(grouped_rows, tiles, score_kind, tie_break=True):
    """Compute the ranked per-tile statistics.

    Parameters
    ----------
    grouped_rows : ParallelCollection
        ``(tile_id, rows)`` pairs from the spatial join.
    tiles : ParallelCollection
        :class:`PartitionTile` elements with unique tile ids.
    score_kind : ScoreKind or str
        Statistic to average per tile.
    tie_break : bool, default True
        Order tiles with equal statistics by ascending tile id.

    Returns
    -------
    list of TileStatistic
        One entry per tile, non-increasing in ``statistic``.
    """
    averages = collection_tile_averages(grouped_rows, score_kind)
    joined = collection_join(tiles, averages, score_kind)
    ranked = collection_rank(joined, tie_break=tie_break).collect()
    log.info("tile_statistics: %d tiles ranked by %s", len(ranked), score_kind)
    return ranked

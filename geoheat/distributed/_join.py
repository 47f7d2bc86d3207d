"""Left outer join of the partition table with per-tile averages."""

from __future__ import annotations

import functools
import logging
from collections import Counter

from geoheat.core.constants import MISSING_TILE_STATISTIC, as_score_kind
from geoheat.core.types import PartitionTile, TileStatistic

log = logging.getLogger("geoheat.distributed.join")


def as_partition_tile(tile):
    """Coerce a tile-like tuple, or a :class:`PartitionTile` with loose field types, into a :class:`PartitionTile`."""
    tile_id, min_x, min_y, max_x, max_y = tile
    return PartitionTile(int(tile_id), float(min_x), float(min_y), float(max_x), float(max_y))


def prepare_partition_table(partition_table):
    """Validate the partition table and freeze it for sharing between workers.

    Raises
    ------
    ValueError
        If a tile id occurs more than once.
    """
    table = tuple(as_partition_tile(t) for t in partition_table)
    duplicated = [tile_id for tile_id, n in Counter(t.tile_id for t in table).items() if n > 1]
    if duplicated:
        raise ValueError(f"partition_table contains duplicate tile ids: {sorted(duplicated)}")
    return table


def to_tile_statistic(kind, joined):
    """Build a :class:`TileStatistic` from a ``(tile, average or None)`` pair."""
    tile, average = joined
    statistic = MISSING_TILE_STATISTIC if average is None else float(average)
    return TileStatistic(tile, statistic, kind)


def join_tiles(partition_table, averages, score_kind):
    """Attach per-tile averages to every tile of the partition table.

    Parameters
    ----------
    partition_table : sequence of PartitionTile
        Tiles to report on. Drives the join.
    averages : mapping of int to float
        Mean score per tile id.
    score_kind : ScoreKind or str
        Score kind recorded on every output row.

    Returns
    -------
    list of TileStatistic
        One entry per tile, in partition table order. Tiles without an
        average get a statistic of ``0.0``.
    """
    kind = str(as_score_kind(score_kind))
    table = prepare_partition_table(partition_table)
    orphans = set(averages) - {t.tile_id for t in table}
    if orphans:
        log.debug("Dropping averages for %d tile ids not in the partition table", len(orphans))
    return [to_tile_statistic(kind, (tile, averages.get(tile.tile_id))) for tile in table]


def _tile_pair(tile):
    return tile.tile_id, tile


def _joined_value(item):
    return item[1]


def collection_join(tiles, averages, score_kind):
    """Left outer join on partitioned collections.

    Parameters
    ----------
    tiles : ParallelCollection
        :class:`PartitionTile` elements.
    averages : ParallelCollection
        ``(tile_id, average)`` pairs.
    score_kind : ScoreKind or str
        Score kind recorded on every output row.

    Returns
    -------
    ParallelCollection
        One :class:`TileStatistic` per tile.
    """
    kind = str(as_score_kind(score_kind))
    joined = tiles.map(_tile_pair).left_outer_join(averages)
    return joined.map(_joined_value).map(functools.partial(to_tile_statistic, kind))

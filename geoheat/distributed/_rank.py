"""Global ordering of tile statistics."""

from __future__ import annotations


def statistic_key(stat):
    """Order by statistic only."""
    return stat.statistic


def statistic_tile_key(stat):
    """Order by statistic, then by ascending tile id when sorted descending."""
    return stat.statistic, -stat.tile_id


def ranking_key(tie_break=True):
    """Sort key for descending ranking, with or without the tile id tiebreak."""
    return statistic_tile_key if tie_break else statistic_key


def rank_statistics(statistics, tie_break=True):
    """Order tile statistics by descending statistic.

    Parameters
    ----------
    statistics : iterable of TileStatistic
        Joined results.
    tie_break : bool, default True
        Order equal statistics by ascending tile id. When False, equal
        statistics keep their input order.

    Returns
    -------
    list of TileStatistic
        Non-increasing in ``statistic``.
    """
    return sorted(statistics, key=ranking_key(tie_break), reverse=True)


def collection_rank(statistics, tie_break=True):
    """Global descending sort of a partitioned :class:`TileStatistic` collection."""
    return statistics.sort_descending_by(ranking_key(tie_break))

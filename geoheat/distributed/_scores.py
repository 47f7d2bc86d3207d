"""Per-tile score aggregation over spatial join rows."""

from __future__ import annotations

import logging
import math

from geoheat.core.constants import as_score_kind
from geoheat.core.types import TileAverage, TileScoreLine

log = logging.getLogger("geoheat.distributed.scores")


class ScoreRowError(ValueError):
    """A spatial join row whose score column cannot be read."""

    def __init__(self, tile_id, fields, reason):
        self.tile_id = tile_id
        self.fields = tuple(fields)
        self.reason = reason
        super().__init__(f"Malformed score row for tile {tile_id}: {reason} (row={self.fields!r})")

    def __reduce__(self):
        # Raised on workers and re-raised on the driver.
        return type(self), (self.tile_id, self.fields, self.reason)


class ScoreSelector:
    """Reads the score of one row for a fixed :class:`ScoreKind`.

    The column position is resolved once from the score kind, so rows are
    only indexed and parsed.

    Parameters
    ----------
    score_kind : ScoreKind or str
        Statistic to read.
    """

    def __init__(self, score_kind):
        self.kind = as_score_kind(score_kind)
        self.offset = self.kind.offset

    def __call__(self, line):
        """Return ``(tile_id, score)`` for a :class:`TileScoreLine`.

        Raises
        ------
        ScoreRowError
            If the row is too short or the score is not a finite number.
        """
        fields = line.fields
        if len(fields) < self.offset:
            raise ScoreRowError(line.tile_id, fields, f"needs at least {self.offset} fields, got {len(fields)}")
        raw = fields[len(fields) - self.offset]
        try:
            score = float(raw.strip())
        except ValueError as exc:
            raise ScoreRowError(line.tile_id, fields, f"{self.kind} value {raw!r} is not a number") from exc
        if not math.isfinite(score):
            raise ScoreRowError(line.tile_id, fields, f"{self.kind} value {raw!r} is not finite")
        return line.tile_id, score

    def __repr__(self):
        return f"ScoreSelector(kind={self.kind}, offset={self.offset})"


def iter_score_lines(grouped_rows):
    """Flatten ``(tile_id, rows)`` pairs into :class:`TileScoreLine` objects."""
    for tile_id, rows in grouped_rows:
        for row in rows:
            yield TileScoreLine.from_row(tile_id, row)


def score_lines_of_group(group):
    """Score lines of one ``(tile_id, rows)`` pair."""
    tile_id, rows = group
    return [TileScoreLine.from_row(tile_id, row) for row in rows]


def seed_score(value):
    """Start a ``(sum, n)`` accumulator from one score."""
    return value, 1


def merge_score(acc, value):
    """Add one score to a ``(sum, n)`` accumulator."""
    return acc[0] + value, acc[1] + 1


def combine_scores(a, b):
    """Merge two ``(sum, n)`` accumulators."""
    return a[0] + b[0], a[1] + b[1]


def finalize_score(acc):
    """Mean of a ``(sum, n)`` accumulator."""
    total, n = acc
    return total / n


def finalize_scores(acc_by_tile):
    """Turn ``{tile_id: (sum, n)}`` into ``{tile_id: mean}``."""
    return {tile_id: finalize_score(acc) for tile_id, acc in acc_by_tile.items() if acc[1] > 0}


def aggregate_scores(lines, score_kind):
    """Average the selected score of every line per tile.

    Parameters
    ----------
    lines : iterable of TileScoreLine
        Spatial join rows attributed to tiles.
    score_kind : ScoreKind or str
        Statistic to average.

    Returns
    -------
    dict of int to float
        Mean score per tile. Tiles without lines are absent.

    Raises
    ------
    ScoreRowError
        On the first row whose score cannot be read.
    """
    select = ScoreSelector(score_kind)
    acc = {}
    for line in lines:
        tile_id, value = select(line)
        acc[tile_id] = merge_score(acc[tile_id], value) if tile_id in acc else seed_score(value)
    return finalize_scores(acc)


def tile_averages(averages):
    """List :class:`TileAverage` entries ordered by tile id."""
    return [TileAverage(tile_id, avg) for tile_id, avg in sorted(averages.items())]


def collection_tile_averages(grouped_rows, score_kind):
    """Compute per-tile averages on a partitioned collection.

    Parameters
    ----------
    grouped_rows : ParallelCollection
        ``(tile_id, rows)`` pairs from the spatial join.
    score_kind : ScoreKind or str
        Statistic to average.

    Returns
    -------
    ParallelCollection
        ``(tile_id, average)`` pairs, one per tile with at least one row.
    """
    select = ScoreSelector(score_kind)
    log.debug("Aggregating %s scores over %d partitions", select.kind, grouped_rows.num_partitions)
    pairs = grouped_rows.flat_map(score_lines_of_group).map(select)
    sums = pairs.combine_by_key(seed_score, merge_score, combine_scores)
    return sums.map_values(finalize_score)

"""Result containers."""

from typing import NamedTuple

import numpy as np
import polars as pl

from geoheat.core.types import TileStatistic

TILE_SCHEMA = {
    "tile_id": pl.Int64,
    "min_x": pl.Float64,
    "min_y": pl.Float64,
    "max_x": pl.Float64,
    "max_y": pl.Float64,
    "statistic": pl.Float64,
    "kind": pl.String,
}


class HeatMapResult(NamedTuple):
    """Container for ranked per-tile heatmap statistics.

    Attributes
    ----------
    statistics : list[TileStatistic]
        One entry per partition tile, non-increasing in ``statistic``.
    kind : str
        Name of the score kind.
    predicate : str
        Name of the spatial join predicate.
    dataset_ids : tuple[str, str]
        Datasets that were joined.
    estimation_params : dict
        Backend and options used for the run.
    """

    statistics: list[TileStatistic]
    kind: str
    predicate: str
    dataset_ids: tuple[str, str]
    estimation_params: dict

    @property
    def n_tiles(self) -> int:
        """Number of reported tiles."""
        return len(self.statistics)

    @property
    def values(self) -> np.ndarray:
        """Statistics in rank order."""
        return np.array([s.statistic for s in self.statistics], dtype=np.float64)

    @property
    def tile_ids(self) -> np.ndarray:
        """Tile ids in rank order."""
        return np.array([s.tile_id for s in self.statistics], dtype=np.int64)

    def top(self, k):
        """Return the ``k`` highest ranked tiles."""
        return self.statistics[:k]

    def to_dataframe(self) -> pl.DataFrame:
        """Convert to Polars DataFrame."""
        return pl.DataFrame(
            {name: [s.as_record()[name] for s in self.statistics] for name in TILE_SCHEMA},
            schema=TILE_SCHEMA,
        )

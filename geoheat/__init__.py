"""Spatial heatmaps over partitioned geometry collections."""

from geoheat.core.collection import LocalCollection, ParallelCollection
from geoheat.core.config import HeatMapConfig
from geoheat.core.constants import Predicate, ScoreKind
from geoheat.core.types import (
    BoundingBox,
    PartitionTile,
    Space,
    SpatialObject,
    TileAverage,
    TileScoreLine,
    TileStatistic,
)
from geoheat.distributed import (
    ScoreRowError,
    aggregate_scores,
    extract_mbb,
    filter_valid_boxes,
    join_tiles,
    rank_statistics,
    reduce_boxes,
)
from geoheat.heatmap import (
    DataConfig,
    HeatMapPipeline,
    HeatMapResult,
    SpatialJoin,
    as_collection,
    generate_pairs,
    heatmap,
    heatmap_task,
)

__version__ = "0.1.0"

__all__ = [
    "BoundingBox",
    "DataConfig",
    "HeatMapConfig",
    "HeatMapPipeline",
    "HeatMapResult",
    "LocalCollection",
    "ParallelCollection",
    "PartitionTile",
    "Predicate",
    "ScoreKind",
    "ScoreRowError",
    "Space",
    "SpatialJoin",
    "SpatialObject",
    "TileAverage",
    "TileScoreLine",
    "TileStatistic",
    "aggregate_scores",
    "as_collection",
    "extract_mbb",
    "filter_valid_boxes",
    "generate_pairs",
    "heatmap",
    "heatmap_task",
    "join_tiles",
    "rank_statistics",
    "reduce_boxes",
]

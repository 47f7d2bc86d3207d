"""Backend-agnostic heatmap stages.

Every function here works on plain Python/NumPy values or on any
:class:`~geoheat.core.collection.ParallelCollection`, and has **zero**
Dask / Spark dependencies. The local, Dask and Spark backends all build on
these stages.
"""

from ._bbox import extract_mbb, extract_partition_boxes, filter_valid_boxes, is_valid_box
from ._join import collection_join, join_tiles, prepare_partition_table
from ._pipeline import tile_statistics
from ._rank import collection_rank, rank_statistics, ranking_key
from ._scores import (
    ScoreRowError,
    ScoreSelector,
    aggregate_scores,
    collection_tile_averages,
    combine_scores,
    finalize_scores,
    iter_score_lines,
    merge_score,
    seed_score,
    tile_averages,
)
from ._space import (
    collection_extent,
    collection_space,
    finalize_space,
    merge_extent,
    merge_space,
    partition_extent,
    partition_space,
    reduce_boxes,
)

__all__ = [
    "ScoreRowError",
    "ScoreSelector",
    "aggregate_scores",
    "collection_extent",
    "collection_join",
    "collection_rank",
    "collection_space",
    "collection_tile_averages",
    "combine_scores",
    "extract_mbb",
    "extract_partition_boxes",
    "filter_valid_boxes",
    "finalize_scores",
    "finalize_space",
    "is_valid_box",
    "iter_score_lines",
    "join_tiles",
    "merge_extent",
    "merge_score",
    "merge_space",
    "partition_extent",
    "partition_space",
    "prepare_partition_table",
    "rank_statistics",
    "ranking_key",
    "reduce_boxes",
    "seed_score",
    "tile_averages",
    "tile_statistics",
]

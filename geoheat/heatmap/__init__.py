"""Tile heatmaps for pairs of spatial datasets."""

from . import format as _format  # noqa: F401
from .data import DataConfig, as_collection
from .pipeline import HeatMapPipeline, SpatialJoin, heatmap
from .results import HeatMapResult
from .task import generate_pairs, heatmap_task

__all__ = [
    "DataConfig",
    "HeatMapPipeline",
    "HeatMapResult",
    "SpatialJoin",
    "as_collection",
    "generate_pairs",
    "heatmap",
    "heatmap_task",
]

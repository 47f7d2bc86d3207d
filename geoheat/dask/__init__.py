"""Dask distributed backend for geoheat."""

from ._collection import DaskCollection, dask_collection
from ._heatmap import dask_heatmap, dask_space
from ._reduce import tree_reduce
from ._utils import get_default_partitions, get_or_create_client, is_dask_bag

__all__ = [
    "DaskCollection",
    "dask_collection",
    "dask_heatmap",
    "dask_space",
    "get_default_partitions",
    "get_or_create_client",
    "is_dask_bag",
    "tree_reduce",
]

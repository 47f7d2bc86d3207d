"""Spark distributed backend for geoheat."""

from ._collection import SparkCollection, spark_collection
from ._heatmap import spark_heatmap, spark_space
from ._utils import get_default_partitions, get_or_create_spark, is_spark_rdd

__all__ = [
    "SparkCollection",
    "get_default_partitions",
    "get_or_create_spark",
    "is_spark_rdd",
    "spark_collection",
    "spark_heatmap",
    "spark_space",
]

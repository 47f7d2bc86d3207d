"""Shared Spark utilities."""

from __future__ import annotations


def is_spark_rdd(data) -> bool:
    """Check if data is a PySpark RDD.

    Parameters
    ----------
    data : object
        Input data to check.

    Returns
    -------
    bool
        True if data is a ``pyspark.RDD``.
    """
    try:
        from pyspark import RDD

        return isinstance(data, RDD)
    except ImportError:
        _type_name = type(data).__module__ + "." + type(data).__qualname__
        if "pyspark" in _type_name.lower():
            raise ImportError(
                f"Input data appears to be a PySpark object ({_type_name}) but "
                "the spark extra is not installed. Install with: "
                "uv pip install 'geoheat[spark]'"
            ) from None
        return False


def get_default_partitions(spark):
    """Compute default partition count from Spark default parallelism.

    Parameters
    ----------
    spark : pyspark.sql.SparkSession
        Active Spark session.

    Returns
    -------
    int
        Recommended number of partitions (default parallelism, minimum 1).
    """
    return max(spark.sparkContext.defaultParallelism, 1)


def get_or_create_spark(spark=None):
    """Get an existing SparkSession or create a local one.

    Parameters
    ----------
    spark : pyspark.sql.SparkSession or None
        An existing Spark session. If None, attempts to get the active
        session or creates a new local session.

    Returns
    -------
    pyspark.sql.SparkSession
        A Spark session.
    """
    try:
        from pyspark.sql import SparkSession
    except ImportError as e:
        raise ImportError("The Spark backend requires pyspark. Install with: uv pip install 'geoheat[spark]'") from e

    if spark is not None:
        return spark
    active = SparkSession.getActiveSession()
    if active is not None:
        return active
    return SparkSession.builder.master("local[*]").appName("geoheat").getOrCreate()

"""Shared fixtures for Spark backend tests."""

import numpy as np
import pytest


def _spark_available():
    """Return True if a local SparkSession can be created."""
    try:
        from pyspark.sql import SparkSession

        spark = (
            SparkSession.builder.master("local[1]").appName("_probe").config("spark.ui.enabled", "false").getOrCreate()
        )
        spark.stop()
        return True
    except (RuntimeError, OSError, ImportError):
        return False


_HAS_SPARK = None


def has_spark():
    """Cached check for Spark availability."""
    global _HAS_SPARK
    if _HAS_SPARK is None:
        _HAS_SPARK = _spark_available()
    return _HAS_SPARK


@pytest.fixture(scope="module")
def spark_session():
    """Shared SparkSession fixture that skips when Java is not available."""
    if not has_spark():
        pytest.skip("Spark/Java not available")
    from pyspark.sql import SparkSession

    spark = (
        SparkSession.builder.master("local[2]")
        .appName("geoheat_test")
        .config("spark.ui.enabled", "false")
        .config("spark.default.parallelism", "2")
        .getOrCreate()
    )
    yield spark
    spark.stop()


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def grouped_rows(rng):
    rows = []
    for tile_id in range(1, 11):
        n = int(rng.integers(1, 9))
        scores = rng.uniform(0.0, 1.0, size=(n, 2))
        rows.append((tile_id, [f"l{i}\tr{i}\t{dice:.6f}\t{jac:.6f}" for i, (dice, jac) in enumerate(scores)]))
    return rows

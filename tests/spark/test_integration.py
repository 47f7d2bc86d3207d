"""End-to-end integration tests for the Spark backend."""

import itertools
import operator

import pytest

pytest.importorskip("pyspark")

from geoheat.core.collection import ParallelCollection
from geoheat.core.types import PartitionTile, Space
from geoheat.distributed import ScoreRowError, aggregate_scores, iter_score_lines, join_tiles, rank_statistics
from geoheat.heatmap import DataConfig, heatmap
from geoheat.spark import SparkCollection, spark_collection, spark_heatmap, spark_space


@pytest.fixture(scope="module")
def tiles():
    return [PartitionTile(i, float(i), 0.0, float(i + 1), 1.0) for i in range(0, 14)]


def test_collection_ops(spark_session):
    coll = SparkCollection.from_sequence(range(10), spark_session, n_partitions=3)
    assert isinstance(coll, ParallelCollection)
    assert coll.num_partitions == 3
    assert coll.reduce(operator.add) == 45
    assert coll.filter(lambda x: x % 2).count() == 5
    assert coll.flat_map(lambda x: [x] * 2).count() == 20
    assert coll.map(lambda x: -x).sort_descending_by(lambda x: x).collect()[:3] == [0, -1, -2]


def test_collection_empty_reduce(spark_session):
    coll = SparkCollection.from_sequence([], spark_session, n_partitions=4)
    assert coll.reduce(operator.add) is None
    assert coll.collect() == []


def test_empty_rdd_reduce(spark_session):
    coll = SparkCollection(spark_session.sparkContext.emptyRDD())
    assert coll.num_partitions == 0
    assert coll.reduce(operator.add) is None


def test_empty_rdd_space_and_prepare(spark_session):
    with pytest.warns(UserWarning, match="dataset 'void'"):
        space = spark_space(spark_session.sparkContext.emptyRDD(), spark=spark_session, dataset_id="void")
    assert space == Space.empty()
    with pytest.warns(UserWarning):
        cfg = DataConfig("void", spark_session.sparkContext.emptyRDD()).prepare(spark=spark_session)
    assert cfg.is_empty
    assert cfg.record_count == 0


def test_combine_and_join(spark_session):
    pairs = SparkCollection.from_sequence([("a", 1), ("b", 2), ("a", 3)], spark_session, n_partitions=2)
    sums = pairs.combine_by_key(lambda v: v, operator.add, operator.add)
    assert sorted(sums.collect()) == [("a", 4), ("b", 2)]

    left = SparkCollection.from_sequence([("a", "x"), ("c", "z")], spark_session)
    assert sorted(left.left_outer_join(sums).collect()) == [("a", ("x", 4)), ("c", ("z", None))]


def test_spark_collection_wraps_rdd(spark_session):
    rdd = spark_session.sparkContext.parallelize([1, 2, 3], 2)
    coll = spark_collection(rdd, spark_session)
    assert coll.rdd is rdd
    assert spark_collection(coll, spark_session) is coll


def test_scenario_matches_expected(spark_session, three_tiles, scenario_rows):
    ranked = spark_heatmap(scenario_rows, three_tiles, "jaccard", spark=spark_session, n_partitions=2)
    assert [s.tile_id for s in ranked] == [1, 2, 3]
    assert [s.statistic for s in ranked] == pytest.approx([0.7, 0.2, 0.0])


@pytest.mark.parametrize("score_kind", ["jaccard", "dice"])
def test_matches_local(spark_session, grouped_rows, tiles, score_kind):
    averages = aggregate_scores(iter_score_lines(grouped_rows), score_kind)
    expected = rank_statistics(join_tiles(tiles, averages, score_kind))

    ranked = spark_heatmap(grouped_rows, tiles, score_kind, spark=spark_session, n_partitions=3)

    assert len(ranked) == len(tiles)
    assert [s.tile_id for s in ranked] == [s.tile_id for s in expected]
    assert [s.statistic for s in ranked] == pytest.approx([s.statistic for s in expected], abs=1e-9)
    assert all(a.statistic >= b.statistic for a, b in itertools.pairwise(ranked))


def test_row_error_fails_job(spark_session, three_tiles):
    with pytest.raises(Exception, match="Malformed score row"):
        spark_heatmap([(1, ["x\tbad"])], three_tiles, "jaccard", spark=spark_session)


def test_space(spark_session, square_wkt):
    assert spark_space(square_wkt, spark=spark_session, n_partitions=2) == Space(0.0, 0.0, 20.0, 20.0, 2)


def test_heatmap_dispatches_on_rdd(spark_session, three_tiles, scenario_rows):
    a = DataConfig("a", [], partition_table=three_tiles)
    b = DataConfig("b", [])

    def join(x, y, predicate):
        return spark_session.sparkContext.parallelize(scenario_rows, 2)

    result = heatmap(a, b, join)
    assert result.estimation_params["backend"] == "spark"
    assert [s.tile_id for s in result.statistics] == [1, 2, 3]


def test_heatmap_dispatches_on_session(spark_session, three_tiles, scenario_rows, square_wkt):
    a = DataConfig("a", square_wkt, partition_table=three_tiles).prepare(spark=spark_session)
    assert a.space.object_count == 2

    result = heatmap(a, DataConfig("b", []), lambda x, y, p: scenario_rows, spark=spark_session)
    assert result.estimation_params["backend"] == "spark"

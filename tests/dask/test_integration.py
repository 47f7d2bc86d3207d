"""End-to-end integration tests for the Dask backend."""

import itertools

import pytest

distributed = pytest.importorskip("distributed")
db = pytest.importorskip("dask.bag")

from geoheat.core.types import PartitionTile, Space
from geoheat.dask import dask_heatmap, dask_space
from geoheat.distributed import ScoreRowError, aggregate_scores, iter_score_lines, join_tiles, rank_statistics
from geoheat.heatmap import DataConfig, heatmap


@pytest.fixture(scope="module")
def tiles():
    return [PartitionTile(i, float(i), 0.0, float(i + 1), 1.0) for i in range(0, 16)]


def test_scenario_matches_expected(dask_client, three_tiles, scenario_rows):
    ranked = dask_heatmap(scenario_rows, three_tiles, "jaccard", client=dask_client, n_partitions=2)
    assert [s.tile_id for s in ranked] == [1, 2, 3]
    assert [s.statistic for s in ranked] == pytest.approx([0.7, 0.2, 0.0])


@pytest.mark.parametrize("score_kind", ["jaccard", "dice"])
def test_matches_local(dask_client, grouped_rows, tiles, score_kind):
    averages = aggregate_scores(iter_score_lines(grouped_rows), score_kind)
    expected = rank_statistics(join_tiles(tiles, averages, score_kind))

    ranked = dask_heatmap(grouped_rows, tiles, score_kind, client=dask_client, n_partitions=4, split_every=2)

    assert len(ranked) == len(tiles)
    assert [s.tile_id for s in ranked] == [s.tile_id for s in expected]
    assert [s.statistic for s in ranked] == pytest.approx([s.statistic for s in expected], abs=1e-9)
    assert all(a.statistic >= b.statistic for a, b in itertools.pairwise(ranked))


def test_accepts_bag_input(dask_client, grouped_rows, tiles):
    bag = db.from_sequence(grouped_rows, npartitions=3)
    ranked = dask_heatmap(bag, tiles, "dice", client=dask_client)
    assert len(ranked) == len(tiles)


def test_row_error_reaches_driver(dask_client, three_tiles):
    with pytest.raises(ScoreRowError):
        dask_heatmap([(1, ["x\tnot-a-number"])], three_tiles, "jaccard", client=dask_client)


def test_space(dask_client, square_wkt):
    space = dask_space([*square_wkt, "broken"], client=dask_client, n_partitions=2)
    assert space == Space(0.0, 0.0, 20.0, 20.0, 2)


def test_space_all_invalid_warns(dask_client):
    with pytest.warns(UserWarning, match="No valid bounding boxes"):
        assert dask_space(["nope"], client=dask_client) == Space.empty()


def test_heatmap_dispatches_on_client(dask_client, three_tiles, scenario_rows, square_wkt):
    a = DataConfig("a", square_wkt, partition_table=three_tiles).prepare(client=dask_client)
    b = DataConfig("b", square_wkt).prepare(client=dask_client)
    assert a.space == Space(0.0, 0.0, 20.0, 20.0, 2)
    assert a.record_count == 2

    result = heatmap(a, b, lambda x, y, p: scenario_rows, client=dask_client)
    assert result.estimation_params["backend"] == "dask"
    assert [s.tile_id for s in result.statistics] == [1, 2, 3]


def test_heatmap_dispatches_on_bag(dask_client, three_tiles, scenario_rows):
    a = DataConfig("a", [], partition_table=three_tiles)
    b = DataConfig("b", [])

    def join(x, y, predicate):
        return db.from_sequence(scenario_rows, npartitions=2)

    result = heatmap(a, b, join)
    assert result.estimation_params["backend"] == "dask"
    assert result.values.tolist() == pytest.approx([0.7, 0.2, 0.0])

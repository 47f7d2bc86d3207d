"""Tests for dataset configuration and backend dispatch."""

import logging

import pytest

from geoheat.core.collection import LocalCollection
from geoheat.core.types import PartitionTile, Space, SpatialObject
from geoheat.heatmap import DataConfig, as_collection


def test_prepare_computes_space(square_wkt):
    cfg = DataConfig("parcels", square_wkt).prepare()
    assert cfg.is_prepared
    assert cfg.space == Space(0.0, 0.0, 20.0, 20.0, 2)
    assert cfg.record_count == 2
    assert not cfg.is_empty


def test_record_count_includes_invalid_records(square_wkt):
    cfg = DataConfig("parcels", [*square_wkt, "POLYGON EMPTY", "junk"]).prepare(n_partitions=2)
    assert cfg.record_count == 4
    assert cfg.space.object_count == 2


def test_prepare_with_geom_index():
    rows = ["1\tpark\tPOINT (2 3)", "2\tlake\tPOINT (8 1)"]
    cfg = DataConfig("pois", rows, geom_index=2).prepare()
    assert cfg.space == Space(2.0, 1.0, 8.0, 3.0, 2)


def test_prepare_mixed_record_types():
    from shapely import wkb
    from shapely.geometry import Point

    records = [SpatialObject("a", "POINT (1 1)"), wkb.dumps(Point(4, 6))]
    assert DataConfig("mixed", records).prepare().space == Space(1.0, 1.0, 4.0, 6.0, 2)


def test_prepare_empty_dataset_warns():
    with pytest.warns(UserWarning, match="dataset 'void'"):
        cfg = DataConfig("void", []).prepare()
    assert cfg.is_empty
    assert cfg.record_count == 0


def test_prepare_logs_summary(square_wkt, caplog):
    with caplog.at_level(logging.INFO, logger="geoheat.heatmap.data"):
        DataConfig("parcels", square_wkt).prepare()
    assert "Prepared dataset 'parcels': 2 of 2 records" in caplog.text


def test_tiler_builds_partition_table(square_wkt):
    def halves(space):
        mid = (space.min_x + space.max_x) / 2
        return [
            PartitionTile(1, space.min_x, space.min_y, mid, space.max_y),
            PartitionTile(2, mid, space.min_y, space.max_x, space.max_y),
        ]

    cfg = DataConfig("parcels", square_wkt).prepare(tiler=halves)
    assert cfg.partition_table == (PartitionTile(1, 0.0, 0.0, 10.0, 20.0), PartitionTile(2, 10.0, 0.0, 20.0, 20.0))


def test_tiler_skipped_for_empty_dataset():
    def fail(space):
        raise AssertionError("tiler must not run")

    with pytest.warns(UserWarning):
        cfg = DataConfig("void", ["junk"]).prepare(tiler=fail)
    assert cfg.partition_table is None


def test_partition_table_is_frozen_and_checked():
    cfg = DataConfig("a", [], partition_table=[(1, 0, 0, 1, 1)])
    assert cfg.partition_table == (PartitionTile(1, 0.0, 0.0, 1.0, 1.0),)
    with pytest.raises(ValueError, match="duplicate"):
        DataConfig("a", [], partition_table=[(1, 0, 0, 1, 1), (1, 1, 1, 2, 2)])


@pytest.mark.parametrize("geom_index", [-1, 1.0, "2"])
def test_invalid_geom_index(geom_index):
    with pytest.raises(ValueError, match="geom_index"):
        DataConfig("a", [], geom_index=geom_index)


def test_unsupported_record_type_propagates():
    with pytest.raises(TypeError):
        DataConfig("bad", [1, 2, 3]).prepare()


def test_as_collection_local():
    coll = as_collection(range(5), n_jobs=2, n_partitions=2)
    assert isinstance(coll, LocalCollection)
    assert coll.num_partitions == 2
    assert coll.collect() == [0, 1, 2, 3, 4]


def test_as_collection_passthrough():
    coll = LocalCollection([[1]])
    assert as_collection(coll) is coll


class NoCountCollection(LocalCollection):
    """Local collection that fails if a separate count job is issued."""

    def count(self):
        raise AssertionError("record count must come from the extent pass")


def test_prepare_counts_in_the_extent_pass(square_wkt):
    records = NoCountCollection([[square_wkt[0], "junk"], [square_wkt[1]]])
    cfg = DataConfig("parcels", records).prepare()
    assert cfg.record_count == 3
    assert cfg.space.object_count == 2


def test_generator_records_can_be_prepared_twice(square_wkt):
    cfg = DataConfig("parcels", (r for r in square_wkt))
    first = cfg.prepare().space
    assert cfg.prepare().space == first == Space(0.0, 0.0, 20.0, 20.0, 2)
    assert cfg.record_count == 2

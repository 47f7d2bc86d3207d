"""Tests for Dask utility functions."""

import numpy as np
import pytest

from geoheat.dask._utils import is_dask_bag


@pytest.mark.parametrize("obj", [np.array([1, 2, 3]), [1, 2, 3], None])
def test_is_dask_bag_non_dask(obj):
    assert is_dask_bag(obj) is False


def test_is_dask_bag_bag():
    db = pytest.importorskip("dask.bag")
    assert is_dask_bag(db.from_sequence([1, 2], npartitions=1)) is True


def test_default_partitions_counts_threads(dask_client):
    from geoheat.dask import get_default_partitions

    assert get_default_partitions(dask_client) == 2


def test_get_or_create_client_passthrough(dask_client):
    from geoheat.dask import get_or_create_client

    assert get_or_create_client(dask_client) is dask_client

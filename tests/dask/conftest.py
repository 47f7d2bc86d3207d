"""Shared fixtures for Dask backend tests."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture(scope="module")
def dask_client():
    pytest.importorskip("distributed")
    from distributed import Client, LocalCluster

    cluster = LocalCluster(n_workers=2, threads_per_worker=1, memory_limit="512MB")
    client = Client(cluster)
    yield client
    client.close()
    cluster.close()


@pytest.fixture
def grouped_rows(rng):
    rows = []
    for tile_id in range(1, 13):
        n = int(rng.integers(1, 9))
        scores = rng.uniform(0.0, 1.0, size=(n, 2))
        rows.append((tile_id, [f"l{i}\tr{i}\t{dice:.6f}\t{jac:.6f}" for i, (dice, jac) in enumerate(scores)]))
    return rows

"""Shared fixtures for backend-agnostic stage tests."""

import numpy as np
import pytest

from geoheat.core.types import BoundingBox


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def random_boxes(rng):
    n = 60
    lo = rng.uniform(1.0, 100.0, size=(n, 2))
    size = rng.uniform(0.5, 20.0, size=(n, 2))
    return [BoundingBox(float(x0), float(y0), float(x0 + w), float(y0 + h), 1) for (x0, y0), (w, h) in zip(lo, size)]


@pytest.fixture
def random_grouped_rows(rng):
    rows = []
    for tile_id in range(1, 9):
        n = int(rng.integers(1, 12))
        scores = rng.uniform(0.0, 1.0, size=(n, 2))
        rows.append((tile_id, [f"a{i}\tb{i}\t{dice:.6f}\t{jac:.6f}" for i, (dice, jac) in enumerate(scores)]))
    return rows

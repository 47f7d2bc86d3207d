"""Shared fixtures for core tests."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def keyed_pairs(rng):
    keys = rng.integers(0, 7, size=200)
    values = rng.standard_normal(200)
    return [(int(k), float(v)) for k, v in zip(keys, values, strict=True)]

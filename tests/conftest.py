"""Shared test configuration utilities for geoheat."""

from __future__ import annotations

import os

import pytest

from geoheat.core.types import PartitionTile

_ENV_FULL = "GEOHEAT_RUN_FULL_TESTS"


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: large randomized checks, run with GEOHEAT_RUN_FULL_TESTS=1")


def pytest_collection_modifyitems(items):
    """Skip slow tests unless the full-test environment variable is set."""
    if os.environ.get(_ENV_FULL):
        return

    skip_marker = pytest.mark.skip(
        reason=(f"Skipped to keep the default CI test run fast. Set {_ENV_FULL}=1 to execute the full test battery.")
    )
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture
def three_tiles():
    return [
        PartitionTile(1, 0.0, 0.0, 10.0, 10.0),
        PartitionTile(2, 10.0, 0.0, 20.0, 10.0),
        PartitionTile(3, 20.0, 0.0, 30.0, 10.0),
    ]


@pytest.fixture
def scenario_rows():
    """Join rows for tiles 1 and 2 whose last column is the Jaccard score."""
    return [
        (1, ["a\t5\t0.8", "b\t5\t0.6"]),
        (2, ["c\t5\t0.2"]),
    ]


@pytest.fixture
def square_wkt():
    return [
        "POLYGON ((0 0, 10 0, 10 10, 0 10, 0 0))",
        "POLYGON ((5 5, 20 5, 20 20, 5 20, 5 5))",
    ]

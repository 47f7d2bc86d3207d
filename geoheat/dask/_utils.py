"""Shared Dask utilities."""

from __future__ import annotations


def is_dask_bag(data) -> bool:
    """Check if data is a Dask Bag.

    Parameters
    ----------
    data : object
        Input data to check.

    Returns
    -------
    bool
        True if data is a ``dask.bag.Bag``.
    """
    try:
        import dask.bag as db

        return isinstance(data, db.Bag)
    except ImportError:
        return False


def get_default_partitions(client):
    """Compute default partition count from total cluster threads.

    Uses the total number of threads across all workers so that every
    thread has at least one partition to work on.

    Parameters
    ----------
    client : distributed.Client
        Dask distributed client.

    Returns
    -------
    int
        Recommended number of partitions (total threads, minimum 1).
    """
    info = client.scheduler_info()
    workers = info.get("workers", {})
    total_threads = sum(w.get("nthreads", 1) for w in workers.values())
    return max(total_threads, 1)


def get_or_create_client(client=None):
    """Get an existing Dask client or create a local one.

    Parameters
    ----------
    client : distributed.Client or None
        An existing Dask distributed client. If None, attempts to get
        the current client or creates a new ``LocalCluster`` client.

    Returns
    -------
    distributed.Client
        A Dask distributed client.
    """
    try:
        from distributed import Client
    except ImportError as e:
        raise ImportError("The Dask backend requires distributed. Install with: uv pip install 'geoheat[dask]'") from e

    if client is not None:
        return client
    try:
        return Client.current()
    except ValueError:
        return Client()

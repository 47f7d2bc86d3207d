"""Thread-pool execution of per-partition work."""

from __future__ import annotations

import contextvars
import os
from concurrent.futures import ThreadPoolExecutor, as_completed


def resolve_workers(n_jobs):
    """Translate ``n_jobs`` into a worker count (``-1`` means all cores)."""
    if n_jobs == -1:
        return os.cpu_count() or 1
    return max(int(n_jobs), 1)


def parallel_map(func, args_list, n_jobs=1):
    """Execute func(*args) for each args in args_list, optionally in parallel.

    Each call receives one partition, so calls never share mutable state and
    results can be merged afterwards in any order.

    ``ContextVar`` values set by the caller are propagated to each worker
    thread via :func:`contextvars.copy_context`.

    Parameters
    ----------
    func : callable
        Function to call for each set of arguments.
    args_list : list of tuples
        Arguments for each call.
    n_jobs : int
        1 = sequential (default), -1 = all cores, >1 = that many workers.

    Returns
    -------
    list
        Results in the same order as args_list.
    """
    if n_jobs == 1 or len(args_list) <= 1:
        return [func(*args) for args in args_list]

    max_workers = resolve_workers(n_jobs)
    results = [None] * len(args_list)

    # Context.run() must not be entered concurrently on the same object.
    contexts = [contextvars.copy_context() for _ in args_list]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_idx = {
            executor.submit(ctx.run, func, *args): i
            for i, (ctx, args) in enumerate(zip(contexts, args_list, strict=True))
        }
        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            results[idx] = future.result()
    return results

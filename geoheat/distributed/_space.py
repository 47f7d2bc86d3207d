"""Reduction of bounding boxes into a dataset extent."""

from __future__ import annotations

import logging
import warnings

import numpy as np

from geoheat.core.types import Space

from ._bbox import extract_partition_boxes

log = logging.getLogger("geoheat.distributed.space")


def partition_space(boxes):
    """Reduce one partition of bounding boxes into a partial :class:`Space`.

    Sentinel boxes (coordinates summing to zero) and boxes with a NaN or
    infinite coordinate are masked out before the reduction.

    Parameters
    ----------
    boxes : iterable of BoundingBox
        Boxes of one partition.

    Returns
    -------
    Space or None
        Extent and summed count of the valid boxes, or ``None`` when the
        partition holds no valid box.
    """
    boxes = list(boxes)
    if not boxes:
        return None

    coords = np.array([box[:4] for box in boxes], dtype=np.float64)
    counts = np.array([box[4] for box in boxes], dtype=np.int64)

    valid = np.isfinite(coords).all(axis=1) & (coords.sum(axis=1) != 0)
    if not valid.any():
        return None
    coords = coords[valid]

    return Space(
        float(coords[:, 0].min()),
        float(coords[:, 1].min()),
        float(coords[:, 2].max()),
        float(coords[:, 3].max()),
        int(counts[valid].sum()),
    )


def merge_space(a, b):
    """Pairwise combiner for partial spaces.

    Associative and commutative, so partials may be merged in any grouping
    and order. ``None`` is the identity.
    """
    if a is None:
        return b
    if b is None:
        return a
    return Space(
        min(a.min_x, b.min_x),
        min(a.min_y, b.min_y),
        max(a.max_x, b.max_x),
        max(a.max_y, b.max_y),
        a.object_count + b.object_count,
    )


def finalize_space(partial, dataset_id=None):
    """Turn the fully merged partial into the dataset :class:`Space`.

    Returns :meth:`Space.empty` with a ``UserWarning`` when no valid box
    survived filtering.
    """
    if partial is None:
        label = f" for dataset '{dataset_id}'" if dataset_id is not None else ""
        warnings.warn(
            f"No valid bounding boxes{label}; the extent is all zeros and object_count is 0.",
            UserWarning,
            stacklevel=2,
        )
        return Space.empty()
    log.debug("Reduced extent %s over %d objects", tuple(partial[:4]), partial.object_count)
    return partial


def reduce_boxes(boxes):
    """Reduce bounding boxes into the global :class:`Space`.

    Parameters
    ----------
    boxes : iterable of BoundingBox
        Boxes of the whole dataset. Sentinel boxes are ignored.

    Returns
    -------
    Space
        Minimum of the minimum corners, maximum of the maximum corners and
        the summed count. All zeros when no valid box is given.
    """
    return finalize_space(partition_space(boxes))


def partition_extent(records, geom_index=None):
    """Partial extent and raw record count of one partition of records."""
    records = list(records)
    return partition_space(extract_partition_boxes(records, geom_index)), len(records)


def merge_extent(a, b):
    """Pairwise combiner for ``(partial space, record count)`` pairs."""
    return merge_space(a[0], b[0]), a[1] + b[1]


def collection_extent(records, geom_index=None, dataset_id=None):
    """Compute the :class:`Space` and raw record count in a single pass.

    Parameters
    ----------
    records : ParallelCollection
        Spatial records.
    geom_index : int or None
        Geometry field of tab-delimited text records.
    dataset_id : str or None
        Used in the warning emitted for an empty extent.

    Returns
    -------
    tuple of (Space, int)
        Reduced extent of all valid records, and the number of records,
        valid or not.
    """
    partials = records.map_partitions(lambda part: [partition_extent(part, geom_index)])
    merged = partials.reduce(merge_extent)
    partial, record_count = (None, 0) if merged is None else merged
    return finalize_space(partial, dataset_id=dataset_id), record_count


def collection_space(records, geom_index=None, dataset_id=None):
    """Compute the :class:`Space` of a partitioned record collection.

    Parameters
    ----------
    records : ParallelCollection
        Spatial records.
    geom_index : int or None
        Geometry field of tab-delimited text records.
    dataset_id : str or None
        Used in the warning emitted for an empty extent.

    Returns
    -------
    Space
        Reduced extent of all valid records.
    """
    return collection_extent(records, geom_index=geom_index, dataset_id=dataset_id)[0]

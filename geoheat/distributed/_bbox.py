"""Bounding box extraction from WKT/WKB records."""

from __future__ import annotations

import logging
import math

from shapely import wkb, wkt
from shapely.errors import ShapelyError

from geoheat.core.constants import FIELD_DELIMITER
from geoheat.core.types import BoundingBox, SpatialObject

log = logging.getLogger("geoheat.distributed.bbox")


def _decode(record, geom_index):
    if isinstance(record, SpatialObject):
        return wkt.loads(record.spatial_data)
    if isinstance(record, str):
        text = record
        if geom_index is not None:
            fields = record.split(FIELD_DELIMITER)
            if geom_index >= len(fields):
                raise ValueError(f"record has {len(fields)} fields, geometry expected at index {geom_index}")
            text = fields[geom_index]
        return wkt.loads(text)
    if isinstance(record, bytes | bytearray | memoryview):
        return wkb.loads(bytes(record))
    raise TypeError(
        f"Invalid spatial object type {type(record).__name__}. Expected WKT text, a SpatialObject or WKB bytes."
    )


def extract_mbb(record, geom_index=None):
    """Return the minimum bounding box of one spatial record.

    Parameters
    ----------
    record : str, SpatialObject, bytes, bytearray or memoryview
        WKT text (optionally a tab-delimited row), a :class:`SpatialObject`
        carrying WKT, or WKB bytes.
    geom_index : int or None, default None
        Field of a tab-delimited text row holding the geometry. ``None``
        treats the whole string as WKT.

    Returns
    -------
    BoundingBox
        Envelope of the geometry with ``count=1``, or the empty sentinel when
        the geometry cannot be decoded, is empty or has NaN or infinite
        coordinates.

    Raises
    ------
    TypeError
        If ``record`` is not one of the supported representations.
    """
    try:
        geometry = _decode(record, geom_index)
    except (ShapelyError, ValueError) as exc:
        log.warning("Could not decode geometry, substituting empty box: %s", exc)
        return BoundingBox.empty()

    if geometry is None or geometry.is_empty:
        log.debug("Empty geometry, substituting empty box")
        return BoundingBox.empty()

    bounds = tuple(float(v) for v in geometry.bounds)
    if not all(math.isfinite(v) for v in bounds):
        log.warning("Geometry has non-finite bounds %s, substituting empty box", bounds)
        return BoundingBox.empty()
    return BoundingBox(*bounds, 1)


def extract_partition_boxes(records, geom_index=None):
    """Extract bounding boxes for every record of one partition."""
    return [extract_mbb(record, geom_index) for record in records]


def is_valid_box(box):
    """True unless the box is the zero-sum sentinel or has a non-finite coordinate."""
    box = BoundingBox(*box)
    return not box.is_empty and all(math.isfinite(v) for v in box[:4])


def filter_valid_boxes(boxes):
    """Drop sentinel boxes before reduction."""
    return [box for box in boxes if is_valid_box(box)]

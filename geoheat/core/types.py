"""Immutable containers for boxes, extents, tiles and per-tile results."""

from typing import NamedTuple

from .constants import FIELD_DELIMITER


class BoundingBox(NamedTuple):
    """Axis-aligned bounding box of a single record.

    The all-zero box is the sentinel for a record without a usable geometry.

    Attributes
    ----------
    min_x, min_y, max_x, max_y : float
        Envelope coordinates.
    count : int
        Number of records the box stands for.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    count: int = 1

    @property
    def is_empty(self) -> bool:
        """True when the coordinates sum to zero.

        This flags the sentinel box, and also any genuine box whose
        coordinates happen to cancel out, such as one centred on the origin.
        """
        return (self.min_x + self.min_y + self.max_x + self.max_y) == 0

    @classmethod
    def empty(cls, count=1):
        """Return the sentinel box."""
        return cls(0.0, 0.0, 0.0, 0.0, count)


class Space(NamedTuple):
    """Global extent and valid object count of one dataset.

    Attributes
    ----------
    min_x, min_y, max_x, max_y : float
        Extent over every valid bounding box.
    object_count : int
        Number of records that contributed to the extent. Zero means the
        extent fields carry no information.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    object_count: int

    @classmethod
    def empty(cls):
        """Return the zero-extent, zero-count space."""
        return cls(0.0, 0.0, 0.0, 0.0, 0)

    @property
    def span_x(self) -> float:
        """Width of the extent."""
        return self.max_x - self.min_x

    @property
    def span_y(self) -> float:
        """Height of the extent."""
        return self.max_y - self.min_y


class SpatialObject(NamedTuple):
    """Textual spatial record: an identifier and its WKT geometry."""

    object_id: str
    spatial_data: str


class TileScoreLine(NamedTuple):
    """One spatial join row attributed to a tile."""

    tile_id: int
    fields: tuple[str, ...]

    @classmethod
    def from_row(cls, tile_id, row):
        """Build a line from a tab-delimited string or a sequence of fields."""
        if isinstance(row, str):
            return cls(int(tile_id), tuple(row.split(FIELD_DELIMITER)))
        return cls(int(tile_id), tuple(str(f) for f in row))


class TileAverage(NamedTuple):
    """Mean score of one tile."""

    tile_id: int
    average: float


class PartitionTile(NamedTuple):
    """Cell of the partition table over which results are reported."""

    tile_id: int
    min_x: float
    min_y: float
    max_x: float
    max_y: float


class TileStatistic(NamedTuple):
    """Statistic reported for one partition tile.

    Attributes
    ----------
    tile : PartitionTile
        Tile the statistic belongs to.
    statistic : float
        Averaged score, ``0.0`` when the tile produced no score rows.
    kind : str
        Name of the score kind.
    """

    tile: PartitionTile
    statistic: float
    kind: str

    @property
    def tile_id(self) -> int:
        return self.tile.tile_id

    @property
    def min_x(self) -> float:
        return self.tile.min_x

    @property
    def min_y(self) -> float:
        return self.tile.min_y

    @property
    def max_x(self) -> float:
        return self.tile.max_x

    @property
    def max_y(self) -> float:
        return self.tile.max_y

    def as_record(self) -> dict:
        """Flatten into the reporting layout."""
        return {
            "tile_id": self.tile_id,
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
            "statistic": self.statistic,
            "kind": self.kind,
        }

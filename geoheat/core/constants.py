"""Constants and enumerations shared across the heatmap pipeline."""

from enum import Enum

DEFAULT_N_JOBS = 1
DEFAULT_SPLIT_EVERY = 8
FIELD_DELIMITER = "\t"
MISSING_TILE_STATISTIC = 0.0


class ScoreKind(Enum):
    """Statistic computed per tile.

    Each kind names the trailing column of a spatial join row that holds its
    value, counted from the end of the row (``1`` is the last column).
    """

    JACCARD = "jaccard"
    DICE = "dice"

    @property
    def offset(self) -> int:
        """Position of the score column counted from the end of a row."""
        return _SCORE_OFFSETS[self]

    def __str__(self):
        return self.name


_SCORE_OFFSETS = {
    ScoreKind.JACCARD: 1,
    ScoreKind.DICE: 2,
}


class Predicate(Enum):
    """Spatial join predicates forwarded to the spatial join."""

    INTERSECTS = "intersects"
    TOUCHES = "touches"
    CROSSES = "crosses"
    CONTAINS = "contains"
    ADJACENT = "adjacent"
    DISJOINT = "disjoint"
    EQUALS = "equals"
    DWITHIN = "dwithin"
    WITHIN = "within"
    OVERLAPS = "overlaps"

    def __str__(self):
        return self.name


def as_score_kind(value) -> ScoreKind:
    """Coerce a string or :class:`ScoreKind` into a :class:`ScoreKind`."""
    if isinstance(value, ScoreKind):
        return value
    if isinstance(value, str):
        try:
            return ScoreKind(value.lower())
        except ValueError:
            pass
    valid = ", ".join(repr(k.value) for k in ScoreKind)
    raise ValueError(f"score_kind={value!r} is not valid. Must be one of {valid}.")


def as_predicate(value) -> Predicate:
    """Coerce a string or :class:`Predicate` into a :class:`Predicate`."""
    if isinstance(value, Predicate):
        return value
    if isinstance(value, str):
        try:
            return Predicate(value.lower())
        except ValueError:
            pass
    valid = ", ".join(repr(p.value) for p in Predicate)
    raise ValueError(f"predicate={value!r} is not valid. Must be one of {valid}.")

"""Configuration for heatmap runs."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import DEFAULT_N_JOBS, DEFAULT_SPLIT_EVERY, Predicate, ScoreKind, as_predicate, as_score_kind


@dataclass
class HeatMapConfig:
    """Heatmap config.

    Attributes
    ----------
    score_kind : ScoreKind
        Statistic averaged per tile.
    predicate : Predicate
        Predicate forwarded to the spatial join.
    n_jobs : int
        Worker threads for the local backend. ``-1`` uses all cores.
    n_partitions : int or None
        Partition count for collections built from plain iterables. ``None``
        uses one partition per worker.
    tie_break : bool
        Order tiles with equal statistics by ascending tile id.
    split_every : int
        Fan-in of tree reductions on the Dask backend.
    """

    score_kind: ScoreKind = ScoreKind.JACCARD
    predicate: Predicate = Predicate.INTERSECTS
    n_jobs: int = DEFAULT_N_JOBS
    n_partitions: int | None = None
    tie_break: bool = True
    split_every: int = DEFAULT_SPLIT_EVERY

    def __post_init__(self):
        self.score_kind = as_score_kind(self.score_kind)
        self.predicate = as_predicate(self.predicate)
        if not isinstance(self.n_jobs, int) or (self.n_jobs < 1 and self.n_jobs != -1):
            raise ValueError(f"n_jobs={self.n_jobs} is not valid. Must be a positive integer or -1 for all cores.")
        if self.n_partitions is not None and (not isinstance(self.n_partitions, int) or self.n_partitions < 1):
            raise ValueError(f"n_partitions={self.n_partitions} is not valid. Must be a positive integer.")
        if not isinstance(self.split_every, int) or self.split_every < 2:
            raise ValueError(f"split_every={self.split_every} is not valid. Must be an integer >= 2.")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {k: v.value if isinstance(v, Enum) else v for k, v in self.__dict__.items()}

"""
Cluster and Zone entities.

A Cluster is the output of a spatial grouper: a non-empty group of
candidates plus their centroid. A Zone is a cluster after scoring and
ranking, ready to be handed to the presenter.
"""

from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from .candidate import Candidate


class Cluster:
    """
    Parameters
    ----------
    members : Sequence[Candidate]
        Candidates grouped together. Must not be empty.
    key : str | None
        Label from the grouper (grid cell, seed id or external group id).
    center : tuple[float, float] | None
        Display center. Defaults to the arithmetic mean of member
        latitudes and longitudes.
    """

    def __init__(
        self,
        members: Sequence[Candidate],
        key: str | None = None,
        center: Tuple[float, float] | None = None,
    ):
        if not members:
            raise ValueError("Cluster requires at least one member")

        self._members: Tuple[Candidate, ...] = tuple(members)
        self._key = key
        self._center = center if center is not None else self._centroid(self._members)
        self._score: float | None = None

    @staticmethod
    def _centroid(members: Sequence[Candidate]) -> Tuple[float, float]:
        # Plain mean of degrees; good enough at map scale.
        coords = np.array([m.location for m in members], dtype=np.float64)
        lat, lng = coords.mean(axis=0)
        return float(lat), float(lng)

    # ========================
    # Properties
    # ========================

    @property
    def members(self) -> Tuple[Candidate, ...]:
        return self._members

    @property
    def member_ids(self) -> List[str | int]:
        return [m.id for m in self._members]

    @property
    def key(self) -> str | None:
        return self._key

    @property
    def center(self) -> Tuple[float, float]:
        return self._center

    @property
    def size(self) -> int:
        return len(self._members)

    @property
    def average_probability(self) -> float:
        return float(np.mean([m.probability for m in self._members]))

    def count_at_least(self, threshold: float) -> int:
        """Number of members with probability >= threshold."""
        return sum(1 for m in self._members if m.probability >= threshold)

    # ========================
    # Score handling
    # ========================

    @property
    def score(self) -> float | None:
        return self._score

    def set_score(self, value: float) -> None:
        """Attach the value computed by the active scorer."""
        self._score = float(value)

    def __repr__(self) -> str:
        return f"Cluster(key={self._key!r}, size={self.size}, score={self._score})"


class Zone:
    """
    A ranked cluster selected for display.

    ``rank`` is 1-based. ``high_confidence_threshold`` is the cut point of
    the scorer that ranked the zone (0.8 or 0.9), reused for the summary.
    """

    def __init__(self, rank: int, cluster: Cluster, high_confidence_threshold: float):
        if cluster.score is None:
            raise ValueError("Zone requires a scored cluster")
        self._rank = int(rank)
        self._cluster = cluster
        self._high_threshold = float(high_confidence_threshold)

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def cluster(self) -> Cluster:
        return self._cluster

    @property
    def score(self) -> float:
        return float(self._cluster.score)

    @property
    def center(self) -> Tuple[float, float]:
        return self._cluster.center

    @property
    def members(self) -> Tuple[Candidate, ...]:
        return self._cluster.members

    @property
    def total(self) -> int:
        return self._cluster.size

    @property
    def high_confidence_threshold(self) -> float:
        return self._high_threshold

    @property
    def high_confidence(self) -> int:
        return self._cluster.count_at_least(self._high_threshold)

    @property
    def average_probability(self) -> float:
        return self._cluster.average_probability

    def summary(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "score": self.score,
            "total": self.total,
            "high_confidence": self.high_confidence,
            "high_confidence_threshold": self._high_threshold,
            "average_probability": self.average_probability,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Zone):
            return NotImplemented
        return (
            self.rank == other.rank
            and self.score == other.score
            and self.center == other.center
            and self._cluster.member_ids == other._cluster.member_ids
        )

    def __hash__(self) -> int:
        return hash((self.rank, self.score, self.center, tuple(self._cluster.member_ids)))

    def __repr__(self) -> str:
        return f"Zone(rank={self._rank}, score={self.score:.3f}, total={self.total})"

"""
Zone selection and ranking.

Scored clusters are stably sorted by descending score, truncated by the
active policy and numbered from 1. Equal scores keep the order in which
the grouper discovered the clusters.
"""

from abc import ABC, abstractmethod
import math
from typing import List, Sequence

from ..core.cluster import Cluster, Zone


class SelectionPolicy(ABC):

    name: str = "base"

    @abstractmethod
    def limit(self, n_clusters: int) -> int:
        """How many of ``n_clusters`` ranked clusters to keep."""
        raise NotImplementedError


class TopK(SelectionPolicy):
    """Keep a fixed number of zones."""

    name: str = "top_k"

    def __init__(self, k: int) -> None:
        k = int(k)
        if k < 1:
            raise ValueError(f"top_k needs k >= 1, got {k}")
        self.k = k

    def limit(self, n_clusters: int) -> int:
        return min(self.k, n_clusters)

    def __repr__(self) -> str:
        return f"TopK({self.k})"


class TopFraction(SelectionPolicy):
    """
    Keep the best ``fraction`` of the clusters, rounded down, but at
    least one whenever any cluster exists.
    """

    name: str = "top_fraction"

    def __init__(self, fraction: float) -> None:
        fraction = float(fraction)
        if not 0.0 < fraction <= 1.0:
            raise ValueError(f"top_fraction needs 0 < fraction <= 1, got {fraction}")
        self.fraction = fraction

    def limit(self, n_clusters: int) -> int:
        if n_clusters == 0:
            return 0
        return max(1, math.floor(n_clusters * self.fraction))

    def __repr__(self) -> str:
        return f"TopFraction({self.fraction})"


def get_selection_policy(name: str, value: float) -> SelectionPolicy:
    if name == TopK.name:
        return TopK(int(value))
    if name == TopFraction.name:
        return TopFraction(float(value))
    raise ValueError(f"Unknown selection policy: {name}. Available: {[TopK.name, TopFraction.name]}")


def rank_clusters(
    clusters: Sequence[Cluster],
    policy: SelectionPolicy,
    high_confidence: float,
) -> List[Zone]:
    """
    Turn scored clusters into ranked zones.

    Raises
    ------
    ValueError
        If a cluster has not been scored.
    """
    if any(c.score is None for c in clusters):
        raise ValueError("rank_clusters expects scored clusters")

    ordered = sorted(clusters, key=lambda c: c.score, reverse=True)
    kept = ordered[: policy.limit(len(ordered))]
    return [Zone(rank, cluster, high_confidence) for rank, cluster in enumerate(kept, start=1)]

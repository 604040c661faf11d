"""
IScorer interface.

Defines the contract for the interchangeable cluster scoring formulas.
Higher scores mark clusters that are more worth reviewing.
"""

from abc import ABC, abstractmethod

from ...core.cluster import Cluster


class IScorer(ABC):
    """
    Abstract base class for cluster scoring formulas.

    ``high_confidence`` is the probability cut point the formula counts as
    a high-confidence member; zone summaries reuse the same value.
    """

    # Identifier for the formula (to be overridden by subclasses)
    name: str = "base"

    high_confidence: float = 0.9

    @abstractmethod
    def calculate(self, cluster: Cluster) -> float:
        """
        Compute the raw score of one cluster.

        Returns
        -------
        float
            A finite, non-negative score.
        """
        raise NotImplementedError

    def score(self, cluster: Cluster) -> Cluster:
        """Compute and attach the score; returns the same cluster."""
        cluster.set_score(self.calculate(cluster))
        return cluster

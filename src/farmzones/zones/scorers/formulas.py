import math
from typing import Dict, List, Type

from .i_scorer import IScorer
from ...core.cluster import Cluster


class SizeScorer(IScorer):
    """score = member count"""

    name: str = "size"

    def calculate(self, cluster: Cluster) -> float:
        return float(cluster.size)


class HighConfidenceRatioScorer(IScorer):
    """score = members >= 0.9 / members"""

    name: str = "high_confidence_ratio"
    high_confidence: float = 0.9

    def calculate(self, cluster: Cluster) -> float:
        return cluster.count_at_least(self.high_confidence) / cluster.size


class WeightedDensityScorer(IScorer):
    """score = average probability * (members >= 0.8 / members)"""

    name: str = "weighted_density"
    high_confidence: float = 0.8

    def calculate(self, cluster: Cluster) -> float:
        ratio = cluster.count_at_least(self.high_confidence) / cluster.size
        return cluster.average_probability * ratio


class LogWeightedScorer(IScorer):
    """score = members >= 0.9 * ln(members + 1)"""

    name: str = "log_weighted"
    high_confidence: float = 0.9

    def calculate(self, cluster: Cluster) -> float:
        return cluster.count_at_least(self.high_confidence) * math.log(cluster.size + 1)


SCORERS: Dict[str, Type[IScorer]] = {
    cls.name: cls
    for cls in (SizeScorer, HighConfidenceRatioScorer, WeightedDensityScorer, LogWeightedScorer)
}


def get_scorer(name: str) -> IScorer:
    """Instantiate a scoring formula by its configuration name."""
    if name not in SCORERS:
        raise ValueError(f"Unknown scoring formula: {name}. Available: {list(SCORERS.keys())}")
    return SCORERS[name]()


def get_available_scorers() -> List[str]:
    return list(SCORERS.keys())

"""
Zone engine configuration.

Bundles every option that changes the zone output and builds the
strategy objects (grouper, scorer, selection policy) from their names.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping

from .groupers.external import ClusterSource, ExternalClusterGrouper
from .groupers.grid import GridGrouper
from .groupers.i_grouper import SpatialGrouper
from .groupers.radius_linkage import RadiusLinkageGrouper
from .scorers.formulas import SCORERS, get_scorer
from .scorers.i_scorer import IScorer
from .selection import SelectionPolicy, get_selection_policy
from .. import config

STRATEGIES: List[str] = [GridGrouper.name, RadiusLinkageGrouper.name, ExternalClusterGrouper.name]


@dataclass(frozen=True)
class ZoneSettings:
    """Configuration for one zone computation."""
    probability_threshold: float
    strategy: str
    scoring_formula: str
    selection_policy: str
    selection_value: float
    debounce_ms: int
    grid_size_degrees: float
    grid_min_members: int
    linkage_radius_km: float
    linkage_min_probability: float
    linkage_min_members: int
    rescoring_min_members: int
    rescoring_min_high_confidence: int
    min_cluster_members: int | None = None  # overrides the active strategy's minimum

    def __post_init__(self) -> None:
        if not 0.0 <= self.probability_threshold <= 1.0:
            raise ValueError(
                f"probability_threshold must be in [0, 1], got {self.probability_threshold}"
            )
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown zone strategy: {self.strategy}. Available: {STRATEGIES}")
        if self.scoring_formula not in SCORERS:
            raise ValueError(
                f"Unknown scoring formula: {self.scoring_formula}. Available: {list(SCORERS.keys())}"
            )
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {self.debounce_ms}")
        # Validates name and value
        self.selection()

    @classmethod
    def from_config(cls, overrides: Mapping[str, Any] | None = None) -> "ZoneSettings":
        """Read defaults from the YAML configuration, then apply ``overrides``."""
        z = config.zones
        values: Dict[str, Any] = {
            "probability_threshold": float(config.candidates["probability_threshold"]),
            "strategy": str(z["strategy"]),
            "scoring_formula": str(z["scoring_formula"]),
            "selection_policy": str(z["selection"]["policy"]),
            "selection_value": float(z["selection"]["value"]),
            "debounce_ms": int(z["debounce_ms"]),
            "grid_size_degrees": float(z["grid"]["size_degrees"]),
            "grid_min_members": int(z["grid"]["min_members"]),
            "linkage_radius_km": float(z["radius_linkage"]["radius_km"]),
            "linkage_min_probability": float(z["radius_linkage"]["min_probability"]),
            "linkage_min_members": int(z["radius_linkage"]["min_members"]),
            "rescoring_min_members": int(z["cluster_rescoring"]["min_members"]),
            "rescoring_min_high_confidence": int(z["cluster_rescoring"]["min_high_confidence"]),
            "min_cluster_members": z.get("min_cluster_members"),
        }
        if overrides:
            values.update(overrides)
        return cls(**values)

    def with_threshold(self, threshold: float) -> "ZoneSettings":
        return replace(self, probability_threshold=float(threshold))

    def selection(self) -> SelectionPolicy:
        return get_selection_policy(self.selection_policy, self.selection_value)

    def scorer(self) -> IScorer:
        return get_scorer(self.scoring_formula)

    def grouper(self, source: ClusterSource | None = None) -> SpatialGrouper:
        """
        Build the configured spatial grouper.

        ``source`` is only used by the cluster-rescoring strategy, which
        pulls its groups from the map's visual clustering.
        """
        override = self.min_cluster_members
        if self.strategy == GridGrouper.name:
            return GridGrouper(
                size_degrees=self.grid_size_degrees,
                min_members=override if override is not None else self.grid_min_members,
            )
        if self.strategy == RadiusLinkageGrouper.name:
            return RadiusLinkageGrouper(
                radius_km=self.linkage_radius_km,
                min_members=override if override is not None else self.linkage_min_members,
                min_probability=self.linkage_min_probability,
            )
        return ExternalClusterGrouper(
            source=source,
            min_members=override if override is not None else self.rescoring_min_members,
            min_high_confidence=self.rescoring_min_high_confidence,
        )

"""
SpatialGrouper interface.

Defines the base contract for every strategy that turns a candidate list
into spatial clusters before scoring and ranking.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ...core.candidate import Candidate
from ...core.cluster import Cluster


class SpatialGrouper(ABC):
    """
    Abstract base class for all spatial grouping strategies.

    Concrete groupers (grid bucketing, radius linkage, external delegate)
    are selected by name through configuration, never by inspecting the
    type of the clusters they produce.

    Responsibilities
    ----------------
    - Expose a single ``group()`` operation.
    - Declare which recompute triggers matter to the strategy, so the
      recompute controller can skip work that cannot change the result.
    """

    # Identifier used in the configuration (to be overridden by subclasses)
    name: str = "base"

    # Recompute when the map viewport settles
    recompute_on_viewport: bool = False

    # Recompute when the externally maintained visual clusters change
    recompute_on_topology: bool = False

    def __init__(self, min_members: int) -> None:
        min_members = int(min_members)
        if min_members < 1:
            raise ValueError(f"min_members must be >= 1, got {min_members}")
        self._min_members = min_members

    @property
    def min_members(self) -> int:
        """Smallest group size that becomes a cluster."""
        return self._min_members

    @abstractmethod
    def group(self, candidates: Sequence[Candidate]) -> List[Cluster]:
        """
        Group candidates into clusters.

        Returns
        -------
        List[Cluster]
            Disjoint clusters, each with at least ``min_members`` members,
            in the strategy's discovery order. An empty input gives an
            empty list.
        """
        raise NotImplementedError

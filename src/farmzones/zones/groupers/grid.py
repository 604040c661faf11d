from typing import Dict, List, Sequence, Tuple
import logging
import math

from .i_grouper import SpatialGrouper
from ...core.candidate import Candidate
from ...core.cluster import Cluster
from ...config import zones


class GridGrouper(SpatialGrouper):
    """
    Density-grid bucketing.

    Summary
    -------
    - Each candidate goes to the cell ``(floor(lng / size), floor(lat / size))``.
    - Cells with fewer than ``min_members`` candidates are dropped.
    - Remaining cells become clusters centred on the mean of their members,
      ordered by descending member count (ties keep discovery order).

    Known limitation
    ----------------
    A real-world hotspot that straddles a cell boundary is split in two.
    This is accepted behaviour of the strategy.
    """

    name: str = "grid"

    def __init__(self, size_degrees: float | None = None, min_members: int | None = None) -> None:
        grid_cfg = zones["grid"]
        super().__init__(min_members if min_members is not None else grid_cfg["min_members"])

        self._logger = logging.getLogger("farmzones.grid")
        self._size = float(size_degrees if size_degrees is not None else grid_cfg["size_degrees"])
        if not self._size > 0:
            raise ValueError(f"Grid size must be positive, got {self._size}")

    @property
    def size_degrees(self) -> float:
        return self._size

    def cell_of(self, candidate: Candidate) -> Tuple[int, int]:
        return (
            math.floor(candidate.lng / self._size),
            math.floor(candidate.lat / self._size),
        )

    def group(self, candidates: Sequence[Candidate]) -> List[Cluster]:
        buckets: Dict[Tuple[int, int], List[Candidate]] = {}
        for candidate in candidates:
            buckets.setdefault(self.cell_of(candidate), []).append(candidate)

        clusters = [
            Cluster(members, key=f"{gx},{gy}")
            for (gx, gy), members in buckets.items()
            if len(members) >= self._min_members
        ]
        clusters.sort(key=lambda c: c.size, reverse=True)

        self._logger.debug(
            "[GRID] %d candidates -> %d cells, %d with >= %d members",
            len(candidates),
            len(buckets),
            len(clusters),
            self._min_members,
        )
        return clusters

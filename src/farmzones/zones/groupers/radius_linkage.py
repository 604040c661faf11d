from typing import List, Sequence
import logging

import numpy as np

from .i_grouper import SpatialGrouper
from ...core.candidate import Candidate
from ...core.cluster import Cluster
from ...core.filtering import filter_candidates
from ...config import zones
from ...geo.distance import haversine_km_many


class RadiusLinkageGrouper(SpatialGrouper):
    """
    Greedy single-pass grouping around seed points.

    Algorithm
    ---------
    1) Keep only candidates with ``probability >= min_probability``.
    2) Walk them in list order; an unused candidate becomes a seed.
    3) Every other unused candidate within ``radius_km`` of the seed
       (not of the evolving centroid) joins the seed and is marked used.
    4) Groups with at least ``min_members`` members become clusters;
       smaller groups are dropped and their points are not re-queued.

    Notes
    -----
    - The result depends on input order: a point within reach of two
      seeds joins whichever seed comes first. This is not transitive
      (connected-components) clustering.
    - O(n^2) distance evaluations on the filtered set.
    """

    name: str = "radius-linkage"
    recompute_on_viewport: bool = True

    def __init__(
        self,
        radius_km: float | None = None,
        min_members: int | None = None,
        min_probability: float | None = None,
    ) -> None:
        linkage_cfg = zones["radius_linkage"]
        super().__init__(min_members if min_members is not None else linkage_cfg["min_members"])

        self._logger = logging.getLogger("farmzones.radius_linkage")
        self._radius_km = float(radius_km if radius_km is not None else linkage_cfg["radius_km"])
        self._min_probability = float(
            min_probability if min_probability is not None else linkage_cfg["min_probability"]
        )

        if self._radius_km < 0:
            raise ValueError(f"Linkage radius must be >= 0 km, got {self._radius_km}")
        if not 0.0 <= self._min_probability <= 1.0:
            raise ValueError(f"min_probability must be in [0, 1], got {self._min_probability}")

    @property
    def radius_km(self) -> float:
        return self._radius_km

    @property
    def min_probability(self) -> float:
        return self._min_probability

    def group(self, candidates: Sequence[Candidate]) -> List[Cluster]:
        points = filter_candidates(candidates, self._min_probability)
        n = len(points)
        if n == 0:
            return []

        lats = np.array([p.lat for p in points], dtype=np.float64)
        lngs = np.array([p.lng for p in points], dtype=np.float64)
        used = np.zeros(n, dtype=bool)

        clusters: List[Cluster] = []
        dropped = 0

        for i in range(n):
            if used[i]:
                continue

            used[i] = True
            rest = np.flatnonzero(~used)
            dist = haversine_km_many(lats[i], lngs[i], lats[rest], lngs[rest])
            joined = rest[dist <= self._radius_km]
            used[joined] = True

            if 1 + len(joined) < self._min_members:
                dropped += 1 + len(joined)
                continue

            members = [points[i]] + [points[j] for j in joined]
            clusters.append(Cluster(members, key=f"seed:{points[i].id}"))

        self._logger.debug(
            "[RADIUS LINKAGE] %d eligible points -> %d clusters (%d points in undersized groups)",
            n,
            len(clusters),
            dropped,
        )
        return clusters

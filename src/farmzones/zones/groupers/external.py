from typing import Callable, Iterable, List, NamedTuple, Sequence, Tuple
import logging

from .i_grouper import SpatialGrouper
from ...core.candidate import Candidate
from ...core.cluster import Cluster
from ...config import zones


class VisualCluster(NamedTuple):
    """A group already merged for display by the map's marker clustering."""

    members: Sequence[Candidate]
    center: Tuple[float, float] | None = None


ClusterSource = Callable[[], Iterable[VisualCluster]]


class ExternalClusterGrouper(SpatialGrouper):
    """
    Re-scores clusters maintained outside the engine.

    The map layer owns the visual clustering; this grouper only pulls the
    current groups through ``source`` and turns them into Clusters.

    Filtering
    ---------
    - Members that are not in the candidate list handed to ``group()``
      (e.g. below the probability threshold) are ignored.
    - Groups smaller than ``min_members`` are dropped.
    - Groups with fewer than ``min_high_confidence`` members at
      ``high_confidence`` probability or above are dropped.

    The display center supplied by the map is kept when present.
    """

    name: str = "cluster-rescoring"
    recompute_on_topology: bool = True

    def __init__(
        self,
        source: ClusterSource | None = None,
        min_members: int | None = None,
        min_high_confidence: int | None = None,
        high_confidence: float = 0.9,
    ) -> None:
        rescoring_cfg = zones["cluster_rescoring"]
        super().__init__(min_members if min_members is not None else rescoring_cfg["min_members"])

        self._logger = logging.getLogger("farmzones.cluster_rescoring")
        self._source = source
        self._min_high = int(
            min_high_confidence
            if min_high_confidence is not None
            else rescoring_cfg["min_high_confidence"]
        )
        self._high_confidence = float(high_confidence)

    def set_source(self, source: ClusterSource | None) -> None:
        self._source = source

    def group(self, candidates: Sequence[Candidate]) -> List[Cluster]:
        if self._source is None:
            self._logger.warning("[CLUSTER RESCORING] No cluster source attached; no clusters.")
            return []

        eligible = {id(c) for c in candidates}
        clusters: List[Cluster] = []

        for index, visual in enumerate(self._source()):
            members = [m for m in visual.members if id(m) in eligible]
            if len(members) < self._min_members:
                continue
            high = sum(1 for m in members if m.probability >= self._high_confidence)
            if high < self._min_high:
                continue
            clusters.append(Cluster(members, key=f"visual:{index}", center=visual.center))

        self._logger.debug("[CLUSTER RESCORING] %d external clusters kept", len(clusters))
        return clusters

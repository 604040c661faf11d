"""
Zone engine.

``compute_zones`` is the full pipeline
(filter -> group -> score -> rank) as a pure function of the candidate
snapshot and the settings. ``recompute`` wraps it around an explicit
``ZoneEngineState`` so that the caller owns the only mutable state.
"""

from enum import Enum
import logging
from typing import List, NamedTuple, Sequence, Tuple

from ..core.candidate import Candidate, check_values
from ..core.cluster import Zone
from ..core.filtering import filter_candidates
from .groupers.i_grouper import SpatialGrouper
from .selection import rank_clusters
from .settings import ZoneSettings

logger = logging.getLogger("farmzones.engine")


class EngineStatus(str, Enum):
    DISABLED = "disabled"
    COMPUTING = "computing"
    READY = "ready"


class ZoneEngineState(NamedTuple):
    """
    Snapshot of the zone engine.

    ``generation`` is the version of the candidate snapshot; ``computed_for``
    is the generation the current ``zones`` were computed from (-1 if none).
    """
    enabled: bool = False
    status: EngineStatus = EngineStatus.DISABLED
    probability_threshold: float = 0.5
    zones: Tuple[Zone, ...] = ()
    generation: int = 0
    computed_for: int = -1

    @property
    def is_stale(self) -> bool:
        return self.enabled and self.computed_for != self.generation


def _drop_malformed(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Skip entries whose location or probability cannot be grouped."""
    kept: List[Candidate] = []
    for candidate in candidates:
        try:
            check_values(float(candidate.lat), float(candidate.lng), float(candidate.probability))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping candidate %r: %s", getattr(candidate, "id", None), exc)
            continue
        kept.append(candidate)
    return kept


def compute_zones(
    candidates: Sequence[Candidate],
    settings: ZoneSettings,
    grouper: SpatialGrouper | None = None,
) -> Tuple[Zone, ...]:
    """
    Run the zone pipeline once.

    Parameters
    ----------
    candidates:
        Full candidate snapshot. Only those at or above
        ``settings.probability_threshold`` are grouped.
    settings:
        Strategy, scoring and selection configuration.
    grouper:
        Pre-built grouper (e.g. with an external cluster source attached).
        Built from ``settings`` when omitted.

    Returns
    -------
    Tuple[Zone, ...]
        Ranked zones, at most the configured cap; empty when nothing
        qualifies.
    """
    eligible = filter_candidates(_drop_malformed(candidates), settings.probability_threshold)
    if grouper is None:
        grouper = settings.grouper()
    scorer = settings.scorer()

    clusters = grouper.group(eligible)
    for cluster in clusters:
        scorer.score(cluster)

    zones = tuple(rank_clusters(clusters, settings.selection(), scorer.high_confidence))

    logger.debug(
        "[ENGINE] %s/%s: %d eligible, %d clusters, %d zones",
        grouper.name,
        scorer.name,
        len(eligible),
        len(clusters),
        len(zones),
    )
    return zones


def recompute(
    state: ZoneEngineState,
    candidates: Sequence[Candidate],
    settings: ZoneSettings,
    grouper: SpatialGrouper | None = None,
) -> ZoneEngineState:
    """
    Return the next engine state for ``candidates``.

    A disabled state comes back with its zones cleared and no work done.
    The threshold stored in ``state`` wins over the one in ``settings``.
    """
    if not state.enabled:
        return state._replace(status=EngineStatus.DISABLED, zones=(), computed_for=-1)

    effective = settings.with_threshold(state.probability_threshold)
    zones = compute_zones(candidates, effective, grouper)
    return state._replace(status=EngineStatus.READY, zones=zones, computed_for=state.generation)

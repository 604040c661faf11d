"""
Recompute controller.

Decides when the zones must be rebuilt and owns the single
``ZoneEngineState`` instance of the application.

State machine
-------------
    DISABLED --enable--> COMPUTING --> READY
    READY --threshold / viewport change (debounced)--> COMPUTING --> READY
    READY | COMPUTING --disable--> DISABLED   (zones cleared, pending work cancelled)
"""

import logging
import time
from typing import Callable, Iterable, List, Mapping, Tuple

from ..config import candidates as candidates_cfg
from ..core.candidate import Candidate
from ..core.cluster import Zone
from ..core.filtering import filter_candidates, needs_review_count
from ..zones.engine import EngineStatus, ZoneEngineState, recompute
from ..zones.groupers.external import ClusterSource
from ..zones.settings import ZoneSettings
from .scheduler import DebounceTimer

RenderCallback = Callable[[Tuple[Zone, ...]], None]


class RecomputeController:
    """
    Parameters
    ----------
    candidates:
        Initial candidate snapshot (may be empty).
    settings:
        Zone settings. Defaults to the YAML configuration.
    render:
        Called with the full zone tuple after every change of the output,
        including the empty tuple when zones are cleared.
    cluster_source:
        Provider of the map's visual clusters, for the cluster-rescoring
        strategy.
    clock:
        Monotonic clock in seconds for the debounce timer.
    """

    def __init__(
        self,
        candidates: Iterable[Candidate] = (),
        settings: ZoneSettings | None = None,
        render: RenderCallback | None = None,
        cluster_source: ClusterSource | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._logger = logging.getLogger("farmzones.controller")
        self._settings = settings if settings is not None else ZoneSettings.from_config()
        self._grouper = self._settings.grouper(cluster_source)
        self._render = render
        self._candidates: Tuple[Candidate, ...] = tuple(candidates)
        self._timer = DebounceTimer(self._settings.debounce_ms, clock)
        self._pending_threshold: float | None = None
        self._state = ZoneEngineState(probability_threshold=self._settings.probability_threshold)

    # ========================
    # Properties
    # ========================

    @property
    def state(self) -> ZoneEngineState:
        return self._state

    @property
    def zones(self) -> Tuple[Zone, ...]:
        return self._state.zones

    @property
    def status(self) -> EngineStatus:
        return self._state.status

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    @property
    def settings(self) -> ZoneSettings:
        return self._settings

    @property
    def candidates(self) -> Tuple[Candidate, ...]:
        return self._candidates

    @property
    def pending(self) -> bool:
        return self._timer.pending

    # ========================
    # Triggers
    # ========================

    def enable(self) -> None:
        if self._state.enabled:
            return
        self._state = self._state._replace(enabled=True)
        self._run("enable")

    def disable(self) -> None:
        """Clear the zones at once and drop any pending recompute."""
        self._timer.cancel()
        threshold = self._take_pending_threshold()
        self._state = self._state._replace(
            enabled=False,
            status=EngineStatus.DISABLED,
            zones=(),
            computed_for=-1,
            probability_threshold=threshold,
        )
        self._logger.info("Zones disabled")
        self._emit()

    def toggle(self) -> bool:
        if self._state.enabled:
            self.disable()
        else:
            self.enable()
        return self._state.enabled

    def set_threshold(self, threshold: float) -> None:
        """Debounced: only the last value of a burst is applied."""
        threshold = float(threshold)
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"Probability threshold must be in [0, 1], got {threshold}")
        self._pending_threshold = threshold
        self._timer.schedule(self._on_timer)

    def viewport_changed(self) -> bool:
        """Schedule a recompute if the active strategy depends on the viewport."""
        if not self._state.enabled or not self._grouper.recompute_on_viewport:
            return False
        self._timer.schedule(self._on_timer)
        return True

    def clusters_changed(self) -> bool:
        """Recompute now if the active strategy reads the map's visual clusters."""
        if not self._state.enabled or not self._grouper.recompute_on_topology:
            return False
        self._run("cluster topology change")
        return True

    def load_candidates(self, candidates: Iterable[Candidate]) -> None:
        """Swap in a new candidate snapshot and bump its generation."""
        self._candidates = tuple(candidates)
        self._state = self._state._replace(generation=self._state.generation + 1)
        self._logger.info(
            "Candidate snapshot %d: %d candidates",
            self._state.generation,
            len(self._candidates),
        )
        if self._state.enabled:
            self._run("candidate reload")

    # ========================
    # Event loop hooks
    # ========================

    def poll(self) -> bool:
        """Give the debounce timer a turn. Returns True if a recompute ran."""
        return self._timer.poll()

    def flush(self) -> bool:
        """Run any pending debounced work immediately."""
        return self._timer.flush()

    # ========================
    # Queries
    # ========================

    def visible_candidates(self) -> List[Candidate]:
        return filter_candidates(self._candidates, self._state.probability_threshold)

    def needs_review(self, votes: Mapping[str, str], min_p: float | None = None) -> int:
        if min_p is None:
            min_p = float(candidates_cfg["review_threshold"])
        return needs_review_count(self._candidates, votes, min_p)

    # ========================
    # Internals
    # ========================

    def _take_pending_threshold(self) -> float:
        threshold = self._pending_threshold
        self._pending_threshold = None
        return self._state.probability_threshold if threshold is None else threshold

    def _on_timer(self) -> None:
        self._state = self._state._replace(probability_threshold=self._take_pending_threshold())
        if self._state.enabled:
            self._run("debounced trigger")

    def _run(self, reason: str) -> None:
        self._state = self._state._replace(status=EngineStatus.COMPUTING)
        started = self._state
        try:
            new_state = recompute(started, self._candidates, self._settings, self._grouper)
        except Exception:
            # Degrade to "no zones" rather than keep stale output
            self._logger.exception("Zone recompute failed (%s); showing no zones", reason)
            new_state = started._replace(
                status=EngineStatus.READY, zones=(), computed_for=started.generation
            )

        self._state = new_state
        self._logger.info(
            "Zones recomputed (%s): %d zone(s) at threshold %.2f",
            reason,
            len(new_state.zones),
            new_state.probability_threshold,
        )
        self._emit()

    def _emit(self) -> None:
        if self._render is not None:
            self._render(self._state.zones)

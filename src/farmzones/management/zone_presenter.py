"""
Zone presenter.

Maps ranked zones to the plain records consumed by the map layer and the
zones panel. Nothing here feeds back into the engine.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np

from ..config import presentation, random_seed
from ..core.cluster import Zone
from ..core.filtering import has_vote

RANK_TIERS = ("top1", "top2", "top3")
STANDARD_TIER = "standard"


class ZonePresenter:
    """
    Parameters
    ----------
    base_radius_m, per_member_radius_m:
        Suggested circle radius is ``base + total * per_member`` metres.
    tier_colors:
        Colour per rank tier (``top1``, ``top2``, ``top3``, ``standard``).
    """

    def __init__(
        self,
        base_radius_m: float | None = None,
        per_member_radius_m: float | None = None,
        tier_colors: Mapping[str, str] | None = None,
    ) -> None:
        self._logger = logging.getLogger("farmzones.presenter")
        self._base_radius_m = float(
            base_radius_m if base_radius_m is not None else presentation["base_radius_m"]
        )
        self._per_member_radius_m = float(
            per_member_radius_m
            if per_member_radius_m is not None
            else presentation["per_member_radius_m"]
        )
        self._tier_colors = dict(tier_colors if tier_colors is not None else presentation["tier_colors"])

        missing = [t for t in (*RANK_TIERS, STANDARD_TIER) if t not in self._tier_colors]
        if missing:
            raise ValueError(f"Missing tier colours: {missing}")

    @staticmethod
    def tier_for_rank(rank: int) -> str:
        if 1 <= rank <= len(RANK_TIERS):
            return RANK_TIERS[rank - 1]
        return STANDARD_TIER

    def radius_m(self, zone: Zone) -> float:
        return self._base_radius_m + zone.total * self._per_member_radius_m

    def present(self, zone: Zone, votes: Mapping[str, str] | None = None) -> Dict[str, Any]:
        """Display record for one zone."""
        lat, lng = zone.center
        tier = self.tier_for_rank(zone.rank)
        record: Dict[str, Any] = {
            "rank": zone.rank,
            "label": f"Zone #{zone.rank}",
            "center": {"lat": lat, "lng": lng},
            "radius_m": self.radius_m(zone),
            "tier": tier,
            "color": self._tier_colors[tier],
            "score": zone.score,
            "total": zone.total,
            "high_confidence": zone.high_confidence,
            "high_confidence_threshold": zone.high_confidence_threshold,
            "average_probability": zone.average_probability,
            "member_ids": list(zone.cluster.member_ids),
        }

        if votes is not None:
            voted = sum(1 for m in zone.members if has_vote(votes, m))
            record["voted"] = voted
            record["progress"] = round(voted / zone.total * 100)

        return record

    def present_all(
        self,
        zones: Sequence[Zone],
        votes: Mapping[str, str] | None = None,
    ) -> List[Dict[str, Any]]:
        return [self.present(zone, votes) for zone in zones]

    def review_queue(self, zone: Zone, seed: int | None = None) -> List[Dict[str, Any]]:
        """
        Members of a zone in a shuffled, reproducible order for one-by-one
        verification.
        """
        rng = np.random.default_rng(random_seed if seed is None else seed)
        order = rng.permutation(zone.total)
        members = zone.members
        return [members[i].to_summary() for i in order]

    def to_json(
        self,
        zones: Sequence[Zone],
        path: str | Path,
        votes: Mapping[str, str] | None = None,
    ) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"zones": self.present_all(zones, votes)}, f, indent=2)
        self._logger.info("Exported %d zone(s) to %s", len(zones), path)
        return path

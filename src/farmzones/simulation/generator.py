"""
Synthetic candidate dataset generator.

Produces a demo dataset in the same JSON layout as the real detection
export, so the whole pipeline can run without the private data:

    {"Farms": [{"ID", "Latitude", "Longitude", "farm_probability"}, ...]}

Layout
------
- ``n_hotspots`` centres drawn uniformly inside ``bbox``.
- Each hotspot gets a random number of sites (``sites_per_hotspot`` range)
  scattered with a Gaussian offset of ``hotspot_spread_km``; their
  probabilities follow ``Beta(hotspot_beta)`` (skewed high).
- ``n_background`` isolated sites drawn uniformly inside ``bbox`` with
  probabilities from ``Beta(background_beta)``.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from ..config import simulation as sim_cfg, paths, random_seed
from ..geo.distance import EARTH_RADIUS_KM

logger = logging.getLogger("farmzones.simulation")

KM_PER_DEGREE = math.pi * EARTH_RADIUS_KM / 180.0


class SyntheticDatasetGenerator:
    """
    Generate a reproducible synthetic candidate dataset.

    All parameters default to the ``simulation`` section of the
    configuration; keyword overrides take precedence.
    """

    def __init__(self, output_path: str | Path | None = None, seed: int | None = None, **overrides: Any):
        self.sim = {**sim_cfg, **overrides}
        self.output_path = (
            Path(output_path)
            if output_path is not None
            else Path(paths["data"]) / self.sim["output_file"]
        )
        self.seed = int(random_seed if seed is None else seed)

    def generate(self) -> List[Dict[str, Any]]:
        """Build the farm records in memory."""
        rng = np.random.default_rng(self.seed)

        lat_min, lat_max, lng_min, lng_max = (float(v) for v in self.sim["bbox"])
        n_hotspots = int(self.sim["n_hotspots"])
        low, high = (int(v) for v in self.sim["sites_per_hotspot"])
        spread_deg = float(self.sim["hotspot_spread_km"]) / KM_PER_DEGREE
        hot_a, hot_b = (float(v) for v in self.sim["hotspot_beta"])
        bg_a, bg_b = (float(v) for v in self.sim["background_beta"])
        n_background = int(self.sim["n_background"])

        lats: List[np.ndarray] = []
        lngs: List[np.ndarray] = []
        probs: List[np.ndarray] = []

        # Hotspots
        centres_lat = rng.uniform(lat_min, lat_max, size=n_hotspots)
        centres_lng = rng.uniform(lng_min, lng_max, size=n_hotspots)
        for c_lat, c_lng in zip(centres_lat, centres_lng):
            n_sites = int(rng.integers(low, high + 1))
            lats.append(c_lat + rng.normal(0.0, spread_deg, size=n_sites))
            # Keep the spread isotropic in km
            lng_spread = spread_deg / max(math.cos(math.radians(c_lat)), 1e-6)
            lngs.append(c_lng + rng.normal(0.0, lng_spread, size=n_sites))
            probs.append(rng.beta(hot_a, hot_b, size=n_sites))

        # Background noise
        lats.append(rng.uniform(lat_min, lat_max, size=n_background))
        lngs.append(rng.uniform(lng_min, lng_max, size=n_background))
        probs.append(rng.beta(bg_a, bg_b, size=n_background))

        all_lats = np.clip(np.concatenate(lats), -90.0, 90.0)
        all_lngs = np.clip(np.concatenate(lngs), -180.0, 180.0)
        all_probs = np.clip(np.concatenate(probs), 0.0, 1.0)

        return [
            {
                "ID": i + 1,
                "Latitude": round(float(lat), 6),
                "Longitude": round(float(lng), 6),
                "farm_probability": round(float(p), 4),
            }
            for i, (lat, lng, p) in enumerate(zip(all_lats, all_lngs, all_probs))
        ]

    def run(self, overwrite: bool = False) -> Path:
        """Write the dataset to ``output_path``; existing output is kept unless ``overwrite``."""
        if self.output_path.exists() and not overwrite:
            logger.info(f"Existing dataset found at {self.output_path}. Skipping.")
            return self.output_path

        farms = self.generate()
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_path, "w", encoding="utf-8") as f:
            json.dump({"Farms": farms}, f)

        logger.info(f"Generated {len(farms)} synthetic candidates in {self.output_path}")
        return self.output_path

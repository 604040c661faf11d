"""
Visualization module.
Renders candidate maps with zone overlays for offline inspection.
"""

import logging
import math
from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.patches import Ellipse
import numpy as np

from ..config import paths
from ..core.candidate import Candidate
from ..core.cluster import Zone
from ..core.filtering import marker_color
from ..geo.distance import EARTH_RADIUS_KM
from .zone_presenter import ZonePresenter

KM_PER_DEGREE = math.pi * EARTH_RADIUS_KM / 180.0


class Visualizer:
    """
    Handles generation of zone map figures.
    """

    def __init__(self, output_dir: str | Path | None = None, presenter: ZonePresenter | None = None) -> None:
        self._output_dir = Path(output_dir) if output_dir is not None else Path(paths["results"]) / "figures"
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._presenter = presenter if presenter is not None else ZonePresenter()
        self._logger = logging.getLogger("farmzones.visualizer")

    def plot_zone_map(
        self,
        candidates: Sequence[Candidate],
        zones: Sequence[Zone],
        title: str = "Candidate sites and high-density zones",
        filename: str = "zone_map.png",
    ) -> Path | None:
        if not candidates:
            self._logger.warning("Cannot plot zone map: no candidates")
            return None

        lats = np.array([c.lat for c in candidates])
        lngs = np.array([c.lng for c in candidates])
        colors = [marker_color(c.probability) for c in candidates]

        fig, ax = plt.subplots(figsize=(10, 10))
        ax.scatter(lngs, lats, s=6, c=colors, alpha=0.8, edgecolors="none")

        # Zone circles: metres -> degrees, stretched in longitude by latitude
        for record in self._presenter.present_all(zones):
            lat = record["center"]["lat"]
            lng = record["center"]["lng"]
            r_lat = record["radius_m"] / 1000.0 / KM_PER_DEGREE
            r_lng = r_lat / max(math.cos(math.radians(lat)), 1e-6)

            ax.add_patch(
                Ellipse(
                    (lng, lat),
                    width=2 * r_lng,
                    height=2 * r_lat,
                    facecolor=record["color"],
                    edgecolor=record["color"],
                    alpha=0.18,
                    linewidth=1,
                )
            )
            ax.annotate(
                f"#{record['rank']}",
                (lng, lat),
                ha="center",
                va="center",
                fontsize=9,
                weight="bold",
            )

        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")
        ax.set_title(title)
        ax.set_aspect("equal", adjustable="datalim")
        ax.grid(True, alpha=0.2)

        out_path = self._output_dir / filename
        fig.savefig(out_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        self._logger.info(f"Saved zone map with {len(zones)} zone(s) to {out_path}")
        return out_path

    def plot_probability_histogram(
        self,
        candidates: Sequence[Candidate],
        threshold: float,
        filename: str = "probability_histogram.png",
    ) -> Path | None:
        if not candidates:
            return None

        probs = np.array([c.probability for c in candidates])

        plt.figure(figsize=(10, 6))
        plt.hist(probs, bins=50, range=(0.0, 1.0), color="steelblue", edgecolor="none")
        plt.axvline(threshold, color="green", linestyle="--", linewidth=2, label=f"Threshold {threshold}")

        plt.title("Distribution of detection probabilities")
        plt.xlabel("Probability")
        plt.ylabel("Candidates")
        plt.legend()

        out_path = self._output_dir / filename
        plt.savefig(out_path, dpi=150)
        plt.close()
        self._logger.info(f"Saved probability histogram to {out_path}")
        return out_path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
import math
from pathlib import Path

from ..core.filtering import marker_color

def create_zone_report(zones, output_filename="results/REPORT_ZONES.pdf"):
    """
    Generate a PDF report with one panel per ranked zone.

    Each panel plots the zone's members around its center, coloured by
    detection probability, so the zones can be checked by eye before
    they are sent out for review.
    """
    path = Path(output_filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\n--- PDF Zone Report: {path} ---")

    if not zones:
        print("WARNING: No zones to report.")
        return None

    # Best zones first (zones already carry their rank)
    ordered = sorted(zones, key=lambda z: z.rank)

    # Grid configuration: 12 zones per page (4 rows x 3 columns)
    ROWS, COLS = 4, 3
    items_per_page = ROWS * COLS
    num_pages = math.ceil(len(ordered) / items_per_page)

    with PdfPages(path) as pdf:
        for i in range(num_pages):
            batch = ordered[i*items_per_page : (i+1)*items_per_page]

            fig, axes = plt.subplots(ROWS, COLS, figsize=(18, 24))
            axes = axes.flatten()

            fig.suptitle(
                f"Zone Report - Page {i+1}/{num_pages} (Zones #{batch[0].rank} -> #{batch[-1].rank})",
                fontsize=20,
            )

            for idx, zone in enumerate(batch):
                ax = axes[idx]

                lats = [m.lat for m in zone.members]
                lngs = [m.lng for m in zone.members]
                colors = [marker_color(m.probability) for m in zone.members]

                ax.scatter(lngs, lats, s=25, c=colors, edgecolors="#2e2e2e", linewidths=0.5)
                c_lat, c_lng = zone.center
                ax.plot(c_lng, c_lat, marker="x", color="black", markersize=10)

                ax.set_title(
                    f"ZONE #{zone.rank}  score {zone.score:.2f}\n"
                    f"{zone.total} sites, {zone.high_confidence} >= {zone.high_confidence_threshold:.0%}, "
                    f"avg {zone.average_probability:.0%}",
                    fontsize=10, weight="bold", backgroundcolor="#f0f0f0",
                )
                ax.set_aspect("equal", adjustable="datalim")
                ax.tick_params(labelsize=7)

            # Disable unused grid cells on the last page
            for j in range(idx + 1, len(axes)):
                axes[j].axis("off")

            pdf.savefig(fig)
            plt.close(fig)

    print("Report generated successfully!")
    return path

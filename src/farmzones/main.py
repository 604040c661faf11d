import sys
from pathlib import Path
from typing import Dict, List

from farmzones.config import paths, logging_cfg, candidates as candidates_cfg
from farmzones.core.dataset import Dataset
from farmzones.core.filtering import heat_points
from farmzones.management.recompute_controller import RecomputeController
from farmzones.management.visualizer import Visualizer
from farmzones.management.zone_presenter import ZonePresenter
from farmzones.management.zone_report import create_zone_report
from farmzones.simulation.generator import SyntheticDatasetGenerator
from farmzones.utils.logger import setup_logger


def print_zones(controller: RecomputeController, presenter: ZonePresenter, votes: Dict[str, str]) -> None:
    """Print the ranked zones the way the zones panel lists them."""
    if not controller.enabled:
        print("Zones are disabled. Enable them first (option 4).")
        return
    if not controller.zones:
        print("No zones.")
        return

    for record in presenter.present_all(controller.zones, votes):
        print(
            f"{record['label']:>9}  score {record['score']:7.3f}  "
            f"sites {record['total']:4d}  "
            f">={record['high_confidence_threshold']:.0%}: {record['high_confidence']:4d}  "
            f"avg {record['average_probability']:.1%}  "
            f"at ({record['center']['lat']:.4f}, {record['center']['lng']:.4f})  "
            f"reviewed {record['progress']}%"
        )


def plot_figures(controller: RecomputeController, visualizer: Visualizer | None = None) -> List[Path]:
    """Zone map of the visible candidates plus the probability histogram of the full snapshot."""
    visualizer = visualizer or Visualizer()
    outputs = [
        visualizer.plot_zone_map(controller.visible_candidates(), controller.zones),
        visualizer.plot_probability_histogram(
            controller.candidates, controller.state.probability_threshold
        ),
    ]
    return [out for out in outputs if out is not None]


def load_dataset(controller: RecomputeController, path: str | None = None) -> Dict[str, str]:
    """Load candidates and votes into the controller; returns the votes."""
    ds = Dataset(path)
    controller.load_candidates(ds.load())
    votes = ds.load_votes()

    visible = controller.visible_candidates()
    print(
        f"Loaded {len(controller.candidates)} candidates "
        f"({len(visible)} shown at {controller.state.probability_threshold:.0%}, "
        f"{len(heat_points(controller.candidates, candidates_cfg['heat_threshold']))} heat points)."
    )
    print(f"{controller.needs_review(votes)} candidate(s) need review.")
    return votes


def main() -> None:
    """
    Command-line interface for the zone engine.

    Menu options:
    1) Generate synthetic dataset
    2) Load dataset
    3) Set probability threshold
    4) Toggle high-density zones
    5) Show ranked zones
    6) Export zones (JSON)
    7) Export review queue for a zone
    8) Plot zone map and probability histogram
    9) PDF zone report
    0) Exit
    """
    setup_logger(logging_cfg)

    controller = RecomputeController()
    presenter = ZonePresenter()
    votes: Dict[str, str] = {}

    while True:
        print("\n=== Farm Zones ===")
        print("1) Generate Synthetic Dataset")
        print("2) Load Dataset")
        print("3) Set Probability Threshold")
        print("4) Toggle High-Density Zones")
        print("5) Show Ranked Zones")
        print("6) Export Zones (JSON)")
        print("7) Export Review Queue")
        print("8) Plot Zone Map + Histogram")
        print("9) PDF Zone Report")
        print("0) Exit")

        choice = input("Select: ").strip()

        if choice == "1":
            out = SyntheticDatasetGenerator().run()
            print(f"Synthetic dataset at {out}. Load it with option 2.")
        elif choice == "2":
            path = input(f"Dataset path [{paths['dataset']}]: ").strip() or None
            votes = load_dataset(controller, path)
        elif choice == "3":
            try:
                percent = float(input("Minimum probability (%): ").strip())
                controller.set_threshold(percent / 100.0)
            except ValueError as e:
                print(f"Invalid threshold: {e}")
                continue
            # No slider bursts on the command line: apply at once
            controller.flush()
            print(f"{len(controller.visible_candidates())} candidates shown.")
        elif choice == "4":
            enabled = controller.toggle()
            print(f"Zones {'enabled' if enabled else 'disabled'}: {len(controller.zones)} zone(s).")
        elif choice == "5":
            print_zones(controller, presenter, votes)
        elif choice == "6":
            out = presenter.to_json(controller.zones, Path(paths["results"]) / "zones.json", votes)
            print(f"Exported {len(controller.zones)} zone(s) to {out}")
        elif choice == "7":
            try:
                rank = int(input("Zone rank: ").strip())
            except ValueError:
                print("Invalid rank.")
                continue
            matching = [z for z in controller.zones if z.rank == rank]
            if not matching:
                print(f"No zone #{rank}.")
                continue
            queue = presenter.review_queue(matching[0])
            print(f"Review queue for zone #{rank} ({len(queue)} sites):")
            for item in queue:
                print(f"  {item['id']}: {item['probability']:.1%} at ({item['lat']:.5f}, {item['lng']:.5f})")
        elif choice == "8":
            saved = plot_figures(controller)
            if not saved:
                print("Nothing to plot. Load a dataset first (option 2).")
            for out in saved:
                print(f"Saved {out}")
        elif choice == "9":
            create_zone_report(controller.zones, Path(paths["results"]) / "REPORT_ZONES.pdf")
        elif choice == "0":
            sys.exit(0)
        else:
            print("Invalid option. Please try again.")

if __name__ == "__main__":
    main()

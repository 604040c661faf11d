"""
Export the review queue of one ranked zone for one-by-one verification.

This script:
- Loads the candidate dataset configured in paths.dataset
- Computes the ranked zones with the configured strategy
- Takes the zone with the requested rank (argv[1], default 1)
- Writes its members, in a reproducible shuffled order, to
  results/review_queue_zone<rank>.json
"""

from pathlib import Path
import json
import sys

from farmzones.config import paths, random_seed
from farmzones.core.dataset import Dataset
from farmzones.management.zone_presenter import ZonePresenter
from farmzones.zones.engine import compute_zones
from farmzones.zones.settings import ZoneSettings

# Requested zone rank (1-based)
rank = int(sys.argv[1]) if len(sys.argv) > 1 else 1

candidates = Dataset().load()
if not candidates:
    raise SystemExit(f"No candidates found in {paths['dataset']}")

zones = compute_zones(candidates, ZoneSettings.from_config())
matching = [z for z in zones if z.rank == rank]
if not matching:
    raise SystemExit(f"No zone with rank {rank} ({len(zones)} zone(s) available)")

# Same seed as the rest of the pipeline so the order is reproducible
queue = ZonePresenter().review_queue(matching[0], seed=random_seed)

out_path = Path(paths["results"]) / f"review_queue_zone{rank}.json"
out_path.parent.mkdir(parents=True, exist_ok=True)
with open(out_path, "w", encoding="utf-8") as f:
    json.dump(queue, f, indent=2)

print(f"Wrote {len(queue)} sites of zone #{rank} to {out_path}")

import os
from pathlib import Path

import yaml

CONFIG_PATH = Path(
    os.getenv(
        "FARMZONES_CONFIG",
        Path(__file__).resolve().parents[2] / "config" / "default.yaml",
    )
)

with open(CONFIG_PATH, "r") as f:
    cfg = yaml.safe_load(f)

random_seed = int(cfg["random_seed"])
paths = cfg["paths"]
candidates = cfg["candidates"]
zones = cfg["zones"]
presentation = cfg["presentation"]
simulation = cfg["simulation"]
logging_cfg = cfg["logging"]

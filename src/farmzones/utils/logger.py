# src/farmzones/utils/logger.py

import logging
from pathlib import Path
from typing import Any, List, Mapping

from ..config import logging_cfg as default_logging_cfg

ROOT_LOGGER = "farmzones"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logger(logging_cfg: Mapping[str, Any] | None = None, name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Configure the package logger from the ``logging`` section of the YAML
    configuration (``level`` and an optional ``file``).

    Component loggers (``farmzones.grid``, ``farmzones.controller``, ...)
    are children of this one and write through its handlers.
    A second call only updates the level of the existing handlers.
    """
    cfg = default_logging_cfg if logging_cfg is None else logging_cfg
    level_name = str(cfg.get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {cfg.get('level')!r}")

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_file = cfg.get("file")
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    formatter = logging.Formatter(_FORMAT, _DATEFMT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

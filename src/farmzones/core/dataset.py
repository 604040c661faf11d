"""
Dataset management class.

Handles:
- loading the static candidate export (JSON or CSV) into Candidate objects;
- loading the exported vote file into a read-only lookup.
"""

from pathlib import Path
import csv
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping

from .candidate import Candidate
from ..config import paths


class Dataset:
    """
    Dataset wrapper.

    Responsibilities:
    - Parse candidate records from the supported formats.
    - Skip malformed records with a warning so one bad row never blocks
      the rest of the dataset.
    - Read the vote export produced by the map front end.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        """
        Parameters
        ----------
        path:
            Candidate file. If None, defaults to ``paths.dataset`` from the
            configuration.
        """
        self._path = Path(path) if path is not None else Path(paths["dataset"])
        self._logger = logging.getLogger("farmzones.dataset")

    @property
    def path(self) -> Path:
        return self._path

    def load(self, path: str | Path | None = None) -> List[Candidate]:
        """
        Load candidates from disk.

        Supported layouts
        -----------------
        - JSON export: ``{"Farms": [{"ID", "Latitude", "Longitude", "farm_probability"}]}``
        - JSON list of ``{"id", "lat", "lng", "probability"}`` records
        - CSV with header ``id,lat,lng,probability``

        A missing file yields an empty list.
        """
        source = Path(path) if path is not None else self._path

        if not source.exists():
            self._logger.warning("Data path not found: %s", source)
            return []

        if source.suffix.lower() == ".csv":
            with open(source, "r", newline="", encoding="utf-8") as f:
                records = list(csv.DictReader(f))
        else:
            with open(source, "r", encoding="utf-8") as f:
                records = self._records_from_json(json.load(f))

        candidates = self.parse_records(records)
        self._logger.info("Loaded %d candidates from %s", len(candidates), source)
        return candidates

    def _records_from_json(self, data: Any) -> List[Mapping[str, Any]]:
        if isinstance(data, dict):
            records = data.get("Farms")
            if records is None:
                raise ValueError("JSON dataset must contain a 'Farms' list")
            return list(records)
        if isinstance(data, list):
            return data
        raise ValueError(f"Unsupported JSON dataset root: {type(data).__name__}")

    def parse_records(self, records: Iterable[Mapping[str, Any]]) -> List[Candidate]:
        """Convert raw records, skipping the malformed ones."""
        candidates: List[Candidate] = []
        skipped = 0

        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                self._logger.warning("Skipping record %d: not an object", index)
                skipped += 1
                continue
            try:
                candidates.append(Candidate.from_record(record))
            except ValueError as exc:
                self._logger.warning("Skipping record %d: %s", index, exc)
                skipped += 1

        if skipped:
            self._logger.warning("Skipped %d malformed record(s)", skipped)
        return candidates

    def load_votes(self, path: str | Path | None = None) -> Dict[str, str]:
        """
        Load the exported vote file.

        Expected shape: ``{"<id>": {"value": "YES" | "NO", "timestamp": ...}}``.
        Returns ``{id: value}`` with string keys; a missing file yields ``{}``.
        """
        source = Path(path) if path is not None else Path(paths["votes"])

        if not source.exists():
            self._logger.info("No vote file at %s", source)
            return {}

        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, Mapping):
            raise ValueError(f"Unsupported vote file root: {type(data).__name__}")

        votes: Dict[str, str] = {}
        for cid, entry in data.items():
            value = entry.get("value") if isinstance(entry, Mapping) else entry
            if value is None:
                self._logger.warning("Ignoring vote without value for %s", cid)
                continue
            votes[str(cid)] = str(value).upper()

        self._logger.info("Loaded %d votes from %s", len(votes), source)
        return votes

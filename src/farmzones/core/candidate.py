"""
Candidate entity definition.
Represents a single farm site flagged by the external detection model.
"""

import math
from typing import Any, Dict, Mapping, Tuple


def check_values(lat: float, lng: float, probability: float) -> None:
    """
    Raise ``ValueError`` unless the location is a finite WGS84 point and
    the probability lies in [0, 1].
    """
    if not all(math.isfinite(v) for v in (lat, lng, probability)):
        raise ValueError(f"non-finite value: lat={lat}, lng={lng}, probability={probability}")
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
        raise ValueError(f"coordinates out of range: ({lat}, {lng})")
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability out of [0, 1]: {probability}")


class Candidate:
    """
    Parameters
    ----------
    id : str | int
        Identifier from the source dataset. Not required to be unique:
        duplicated IDs are kept as independent points.
    lat : float
        Latitude in degrees (WGS84).
    lng : float
        Longitude in degrees (WGS84).
    probability : float
        Detection confidence in [0, 1].

    Location and probability are read-only once the candidate is built.
    Voting state lives in the external vote store, never on the candidate.
    """

    __slots__ = ("_id", "_lat", "_lng", "_probability")

    def __init__(self, id: str | int, lat: float, lng: float, probability: float):
        lat, lng, probability = float(lat), float(lng), float(probability)
        check_values(lat, lng, probability)

        self._id = id
        self._lat = lat
        self._lng = lng
        self._probability = probability

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Candidate":
        """
        Build a candidate from a loader record.

        Accepts both the raw export keys (``ID``, ``Latitude``, ``Longitude``,
        ``farm_probability``) and the short keys (``id``, ``lat``, ``lng``,
        ``probability``).

        Raises
        ------
        ValueError
            If a field is missing, not numeric, or out of range.
        """
        def _field(*keys: str) -> Any:
            for key in keys:
                if key in record and record[key] is not None and record[key] != "":
                    return record[key]
            raise ValueError(f"missing field {keys[0]!r} in record {dict(record)!r}")

        cid = _field("id", "ID")
        try:
            lat = float(_field("lat", "Latitude"))
            lng = float(_field("lng", "Longitude"))
            probability = float(_field("probability", "farm_probability"))
        except TypeError as exc:
            raise ValueError(f"non-numeric field in record {dict(record)!r}") from exc

        return cls(cid, lat, lng, probability)

    # ========================
    # Properties
    # ========================

    @property
    def id(self) -> str | int:
        return self._id

    @property
    def lat(self) -> float:
        return self._lat

    @property
    def lng(self) -> float:
        return self._lng

    @property
    def location(self) -> Tuple[float, float]:
        return self._lat, self._lng

    @property
    def probability(self) -> float:
        return self._probability

    # ========================
    # Summary
    # ========================

    def to_summary(self) -> Dict[str, Any]:
        """Return the record shape shared with the loader and review queue."""
        return {
            "id": self.id,
            "lat": self.lat,
            "lng": self.lng,
            "probability": self.probability,
        }

    def __repr__(self) -> str:
        return f"Candidate(id={self._id!r}, lat={self._lat}, lng={self._lng}, p={self._probability})"

"""
Candidate-level selection and display helpers.

All thresholds are inclusive (``probability >= threshold``) and every
function preserves the input order.
"""

from typing import Iterable, Iterator, List, Mapping

from .candidate import Candidate

# Marker fill colours on the overview map
MARKER_COLORS = (
    (0.9, "#c62828"),
    (0.7, "#ef6c00"),
    (0.5, "#f9a825"),
)
MARKER_COLOR_LOW = "#2e7d32"

# Tier classes used when a zone's farms are shown for review
MARKER_TIERS = (
    (0.85, "prob-very-high"),
    (0.75, "prob-high"),
    (0.65, "prob-medium"),
)
MARKER_TIER_LOW = "prob-low"


def _check_threshold(min_p: float) -> float:
    min_p = float(min_p)
    if not 0.0 <= min_p <= 1.0:
        raise ValueError(f"Probability threshold must be in [0, 1], got {min_p}")
    return min_p


def iter_candidates(candidates: Iterable[Candidate], min_p: float) -> Iterator[Candidate]:
    """Lazily yield candidates with ``probability >= min_p``."""
    min_p = _check_threshold(min_p)
    return (c for c in candidates if c.probability >= min_p)


def filter_candidates(candidates: Iterable[Candidate], min_p: float) -> List[Candidate]:
    """Materialized version of ``iter_candidates``."""
    return list(iter_candidates(candidates, min_p))


def marker_color(probability: float) -> str:
    for threshold, color in MARKER_COLORS:
        if probability >= threshold:
            return color
    return MARKER_COLOR_LOW


def marker_tier(probability: float) -> str:
    for threshold, tier in MARKER_TIERS:
        if probability >= threshold:
            return tier
    return MARKER_TIER_LOW


def heat_points(candidates: Iterable[Candidate], min_p: float = 0.75) -> List[List[float]]:
    """``[lat, lng, weight]`` triples for the heat-map overlay."""
    return [[c.lat, c.lng, c.probability] for c in iter_candidates(candidates, min_p)]


def has_vote(votes: Mapping[str, str], candidate: Candidate) -> bool:
    # Exported vote files key everything by string id
    return str(candidate.id) in votes


def needs_review_count(
    candidates: Iterable[Candidate],
    votes: Mapping[str, str],
    min_p: float,
) -> int:
    """
    Count candidates at or above ``min_p`` that have no recorded vote.

    ``votes`` comes from the external vote store and is only read.
    """
    return sum(1 for c in iter_candidates(candidates, min_p) if not has_vote(votes, c))

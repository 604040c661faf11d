"""Shared fixtures for the zone engine tests."""

import pytest

from farmzones.core.candidate import Candidate
from farmzones.zones.settings import ZoneSettings


class FakeClock:
    """Monotonic clock driven by the test."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_candidates():
    """Build candidates from ``(id, lat, lng, probability)`` tuples."""
    def _make(rows):
        return [Candidate(cid, lat, lng, p) for cid, lat, lng, p in rows]
    return _make


@pytest.fixture
def scenario_candidates(make_candidates):
    # 1 and 2 are ~1.6 km apart; 3 is isolated
    return make_candidates([
        (1, 10.0, 10.0, 0.95),
        (2, 10.01, 10.01, 0.92),
        (3, 50.0, 50.0, 0.99),
    ])


@pytest.fixture
def make_settings():
    """ZoneSettings from the YAML defaults with keyword overrides."""
    def _make(**overrides):
        return ZoneSettings.from_config(overrides)
    return _make


@pytest.fixture
def linkage_settings(make_settings):
    return make_settings(
        probability_threshold=0.9,
        strategy="radius-linkage",
        scoring_formula="log_weighted",
        selection_policy="top_k",
        selection_value=8,
        linkage_radius_km=5.0,
        linkage_min_probability=0.9,
        linkage_min_members=2,
        debounce_ms=150,
    )


@pytest.fixture
def grid_cell_rows():
    """Ten points inside the 0.5 degree cell (lng 40, lat 20)."""
    return [
        (i, 10.05 + 0.04 * i, 20.05 + 0.03 * i, 0.6 + 0.03 * i)
        for i in range(10)
    ]

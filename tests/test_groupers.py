"""Tests for the spatial grouping strategies."""

import itertools

import numpy as np
import pytest

from farmzones.core.candidate import Candidate
from farmzones.geo.distance import haversine_km
from farmzones.zones.groupers.external import ExternalClusterGrouper, VisualCluster
from farmzones.zones.groupers.grid import GridGrouper
from farmzones.zones.groupers.radius_linkage import RadiusLinkageGrouper


class TestGridGrouper:
    def test_below_minimum_gives_no_cluster(self, make_candidates, grid_cell_rows):
        grouper = GridGrouper(size_degrees=0.5, min_members=10)
        assert grouper.group(make_candidates(grid_cell_rows[:9])) == []

    def test_minimum_reached_gives_one_cluster_at_mean(self, make_candidates, grid_cell_rows):
        grouper = GridGrouper(size_degrees=0.5, min_members=10)
        clusters = grouper.group(make_candidates(grid_cell_rows))

        assert len(clusters) == 1
        cluster = clusters[0]
        assert cluster.size == 10
        assert cluster.key == "40,20"
        lat, lng = cluster.center
        assert lat == pytest.approx(np.mean([r[1] for r in grid_cell_rows]))
        assert lng == pytest.approx(np.mean([r[2] for r in grid_cell_rows]))

    def test_cell_key_uses_floor(self):
        grouper = GridGrouper(size_degrees=0.5, min_members=1)
        assert grouper.cell_of(Candidate(1, -0.1, -0.1, 0.5)) == (-1, -1)
        assert grouper.cell_of(Candidate(1, 0.5, 0.49, 0.5)) == (0, 1)

    def test_boundary_splits_hotspot(self, make_candidates):
        # Same hotspot on both sides of lat 10.5: two cells
        grouper = GridGrouper(size_degrees=0.5, min_members=1)
        clusters = grouper.group(make_candidates([(1, 10.49, 20.1, 0.9), (2, 10.51, 20.1, 0.9)]))
        assert len(clusters) == 2

    def test_sorted_by_member_count_stable(self, make_candidates):
        rows = [
            (1, 0.1, 0.1, 0.9),
            (2, 1.1, 1.1, 0.9), (3, 1.2, 1.2, 0.9),
            (4, 2.1, 2.1, 0.9),
        ]
        grouper = GridGrouper(size_degrees=0.5, min_members=1)
        clusters = grouper.group(make_candidates(rows))
        assert [c.member_ids for c in clusters] == [[2, 3], [1], [4]]

    def test_empty(self):
        assert GridGrouper(size_degrees=0.5, min_members=1).group([]) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            GridGrouper(size_degrees=0.0, min_members=1)


class TestRadiusLinkageGrouper:
    def test_scenario(self, scenario_candidates):
        grouper = RadiusLinkageGrouper(radius_km=5.0, min_members=2, min_probability=0.9)
        clusters = grouper.group(scenario_candidates)

        assert len(clusters) == 1
        assert clusters[0].member_ids == [1, 2]
        assert clusters[0].center == pytest.approx((10.005, 10.005))

    def test_filters_low_confidence(self, make_candidates):
        candidates = make_candidates([(1, 10.0, 10.0, 0.95), (2, 10.01, 10.01, 0.85)])
        grouper = RadiusLinkageGrouper(radius_km=5.0, min_members=2, min_probability=0.9)
        assert grouper.group(candidates) == []

    def test_links_to_seed_not_centroid(self, make_candidates):
        # Equator: 0.036 deg ~ 4.0 km, 0.072 deg ~ 8.0 km
        rows = [("a", 0.0, 0.0, 0.95), ("b", 0.0, 0.036, 0.95), ("c", 0.0, 0.072, 0.95)]
        grouper = RadiusLinkageGrouper(radius_km=5.0, min_members=2, min_probability=0.9)

        forward = grouper.group(make_candidates(rows))
        assert [c.member_ids for c in forward] == [["a", "b"]]

        backward = grouper.group(make_candidates(list(reversed(rows))))
        assert [c.member_ids for c in backward] == [["c", "b"]]

    def test_members_near_seed_and_disjoint(self):
        rng = np.random.default_rng(3)
        centres = rng.uniform(10, 11, size=(6, 2))
        candidates = []
        for k, (lat, lng) in enumerate(centres):
            for j in range(15):
                candidates.append(
                    Candidate(
                        f"{k}-{j}",
                        float(lat + rng.normal(0, 0.02)),
                        float(lng + rng.normal(0, 0.02)),
                        float(rng.uniform(0.9, 1.0)),
                    )
                )

        grouper = RadiusLinkageGrouper(radius_km=3.0, min_members=2, min_probability=0.9)
        clusters = grouper.group(candidates)
        assert clusters

        for cluster in clusters:
            seed = cluster.members[0]
            for member in cluster.members:
                assert haversine_km(seed.lat, seed.lng, member.lat, member.lng) <= 3.0
            assert cluster.size >= 2

        for a, b in itertools.combinations(clusters, 2):
            assert not {id(m) for m in a.members} & {id(m) for m in b.members}

    def test_radius_is_inclusive(self, make_candidates):
        # Coincident points sit exactly at distance 0
        candidates = make_candidates([(1, 10.0, 10.0, 0.95), (2, 10.0, 10.0, 0.92)])
        grouper = RadiusLinkageGrouper(radius_km=0.0, min_members=2, min_probability=0.9)
        assert len(grouper.group(candidates)) == 1

    def test_empty(self):
        assert RadiusLinkageGrouper(radius_km=5.0, min_members=2, min_probability=0.9).group([]) == []

    @pytest.mark.parametrize("kwargs", [{"radius_km": -1.0}, {"min_probability": 1.5}, {"min_members": 0}])
    def test_invalid_parameters(self, kwargs):
        params = {"radius_km": 5.0, "min_members": 2, "min_probability": 0.9, **kwargs}
        with pytest.raises(ValueError):
            RadiusLinkageGrouper(**params)


class TestExternalClusterGrouper:
    def test_rescoring_filters(self, make_candidates):
        candidates = make_candidates([
            (1, 10.0, 10.0, 0.95), (2, 10.0, 10.0, 0.6), (3, 10.0, 10.0, 0.6), (4, 10.0, 10.0, 0.6),
            (5, 20.0, 20.0, 0.6), (6, 20.0, 20.0, 0.6), (7, 20.0, 20.0, 0.6), (8, 20.0, 20.0, 0.6),
            (9, 30.0, 30.0, 0.95),
        ])
        visual = [
            VisualCluster(candidates[0:4], center=(10.0, 10.0)),
            VisualCluster(candidates[4:8]),   # no member >= 0.9
            VisualCluster(candidates[8:9]),   # too small
        ]
        grouper = ExternalClusterGrouper(source=lambda: visual, min_members=4, min_high_confidence=1)
        clusters = grouper.group(candidates)

        assert len(clusters) == 1
        assert clusters[0].member_ids == [1, 2, 3, 4]
        assert clusters[0].center == (10.0, 10.0)

    def test_ignores_members_outside_input(self, make_candidates):
        candidates = make_candidates([(1, 10.0, 10.0, 0.95), (2, 10.0, 10.0, 0.92)])
        visual = [VisualCluster(candidates)]
        grouper = ExternalClusterGrouper(source=lambda: visual, min_members=2, min_high_confidence=1)
        assert grouper.group(candidates[:1]) == []
        assert len(grouper.group(candidates)) == 1

    def test_no_source(self, scenario_candidates):
        assert ExternalClusterGrouper(min_members=1).group(scenario_candidates) == []

    def test_trigger_flags(self):
        assert ExternalClusterGrouper.recompute_on_topology
        assert not ExternalClusterGrouper.recompute_on_viewport
        assert RadiusLinkageGrouper.recompute_on_viewport
        assert not GridGrouper.recompute_on_viewport and not GridGrouper.recompute_on_topology

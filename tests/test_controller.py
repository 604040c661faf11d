"""Tests for the recompute controller and its debounce timer."""

from types import SimpleNamespace

import pytest

from farmzones.management.recompute_controller import RecomputeController
from farmzones.management.scheduler import DebounceTimer
from farmzones.zones.engine import EngineStatus
from farmzones.zones.groupers.external import VisualCluster


class TestDebounceTimer:
    def test_fires_after_quiet_period(self, clock):
        calls = []
        timer = DebounceTimer(150, clock)
        timer.schedule(lambda: calls.append(1))

        clock.advance_ms(149)
        assert not timer.poll()
        clock.advance_ms(2)
        assert timer.poll()
        assert calls == [1]
        assert not timer.pending

    def test_only_last_of_burst_runs(self, clock):
        calls = []
        timer = DebounceTimer(150, clock)
        for value in range(5):
            timer.schedule(lambda v=value: calls.append(v))
            clock.advance_ms(100)
        assert not timer.poll()

        clock.advance_ms(60)
        assert timer.poll()
        assert calls == [4]

    def test_cancel(self, clock):
        calls = []
        timer = DebounceTimer(150, clock)
        timer.schedule(lambda: calls.append(1))
        assert timer.cancel()
        clock.advance_ms(500)
        assert not timer.poll()
        assert calls == []
        assert not timer.cancel()

    def test_flush(self, clock):
        calls = []
        timer = DebounceTimer(150, clock)
        timer.schedule(lambda: calls.append(1))
        assert timer.flush()
        assert calls == [1]
        assert not timer.flush()

    def test_negative_delay(self):
        with pytest.raises(ValueError):
            DebounceTimer(-1)


@pytest.fixture
def rendered():
    return []


@pytest.fixture
def controller(scenario_candidates, linkage_settings, clock, rendered):
    return RecomputeController(
        scenario_candidates,
        settings=linkage_settings,
        render=rendered.append,
        clock=clock,
    )


class TestStateMachine:
    def test_starts_disabled(self, controller, rendered):
        assert controller.status is EngineStatus.DISABLED
        assert controller.zones == ()
        assert rendered == []

    def test_enable_computes(self, controller, rendered):
        controller.enable()
        assert controller.status is EngineStatus.READY
        assert [z.cluster.member_ids for z in controller.zones] == [[1, 2]]
        assert rendered[-1] == controller.zones

    def test_enable_twice_is_noop(self, controller, rendered):
        controller.enable()
        controller.enable()
        assert len(rendered) == 1

    def test_disable_clears_and_cancels(self, controller, clock, rendered):
        controller.enable()
        controller.set_threshold(0.5)
        assert controller.pending

        controller.disable()
        assert controller.status is EngineStatus.DISABLED
        assert controller.zones == ()
        assert rendered[-1] == ()
        assert not controller.pending

        clock.advance_ms(1000)
        assert not controller.poll()
        assert controller.zones == ()
        # The threshold itself still moved
        assert controller.state.probability_threshold == 0.5

    def test_toggle(self, controller):
        assert controller.toggle() is True
        assert controller.zones
        assert controller.toggle() is False
        assert controller.zones == ()


class TestTriggers:
    def test_threshold_burst_is_debounced(self, controller, clock, rendered):
        controller.enable()
        computed = len(rendered)

        controller.set_threshold(0.5)
        clock.advance_ms(100)
        controller.set_threshold(0.96)
        clock.advance_ms(100)
        assert not controller.poll()
        assert len(rendered) == computed

        clock.advance_ms(60)
        assert controller.poll()
        assert len(rendered) == computed + 1
        assert controller.state.probability_threshold == 0.96
        assert controller.zones == ()
        assert [c.id for c in controller.visible_candidates()] == [3]

    def test_threshold_while_disabled_skips_computation(self, controller, rendered):
        controller.set_threshold(0.95)
        assert controller.flush()
        assert rendered == []
        assert controller.state.probability_threshold == 0.95
        assert controller.status is EngineStatus.DISABLED

    def test_invalid_threshold(self, controller):
        with pytest.raises(ValueError):
            controller.set_threshold(1.5)

    def test_viewport_change_for_radius_linkage(self, controller, clock):
        assert not controller.viewport_changed()
        controller.enable()
        assert controller.viewport_changed()
        clock.advance_ms(160)
        assert controller.poll()
        assert controller.status is EngineStatus.READY

    def test_viewport_change_ignored_by_grid(self, scenario_candidates, make_settings, clock):
        controller = RecomputeController(
            scenario_candidates, settings=make_settings(strategy="grid"), clock=clock
        )
        controller.enable()
        assert not controller.viewport_changed()
        assert not controller.pending

    def test_cluster_topology_change(self, make_candidates, make_settings):
        candidates = make_candidates([(i, 10.0, 10.0, 0.95) for i in range(4)])
        groups = []
        controller = RecomputeController(
            candidates,
            settings=make_settings(
                strategy="cluster-rescoring",
                probability_threshold=0.5,
                rescoring_min_members=4,
            ),
            cluster_source=lambda: groups,
        )
        controller.enable()
        assert controller.zones == ()

        groups.append(VisualCluster(candidates, center=(10.0, 10.0)))
        assert controller.clusters_changed()
        assert len(controller.zones) == 1
        assert controller.zones[0].center == (10.0, 10.0)

    def test_topology_change_ignored_by_radius_linkage(self, controller):
        controller.enable()
        assert not controller.clusters_changed()

    def test_load_candidates_bumps_generation(self, controller, make_candidates):
        controller.enable()
        controller.load_candidates([])
        assert controller.state.generation == 1
        assert controller.state.computed_for == 1
        assert not controller.state.is_stale
        assert controller.zones == ()

        controller.load_candidates(make_candidates([(1, 10.0, 10.0, 0.95), (2, 10.01, 10.01, 0.92)]))
        assert len(controller.zones) == 1

    def test_malformed_candidate_keeps_other_zones(self, make_candidates, make_settings, grid_cell_rows):
        bad = SimpleNamespace(id="bad", lat=float("nan"), lng=20.1, probability=0.95)
        controller = RecomputeController(
            make_candidates(grid_cell_rows) + [bad],
            settings=make_settings(
                probability_threshold=0.5,
                strategy="grid",
                grid_size_degrees=0.5,
                grid_min_members=10,
            ),
        )
        controller.enable()

        assert len(controller.zones) == 1
        assert controller.zones[0].total == 10
        assert controller.status is EngineStatus.READY

    def test_failed_recompute_shows_no_zones(self, scenario_candidates, make_settings, rendered):
        def broken():
            raise RuntimeError("map not ready")

        controller = RecomputeController(
            scenario_candidates,
            settings=make_settings(strategy="cluster-rescoring"),
            render=rendered.append,
            cluster_source=broken,
        )
        controller.enable()
        assert controller.zones == ()
        assert controller.status is EngineStatus.READY
        assert rendered == [()]


class TestNeedsReview:
    def test_counts_against_votes(self, controller):
        assert controller.needs_review({"1": "YES"}, min_p=0.9) == 2
        assert controller.needs_review({}, min_p=0.99) == 1

"""Tests for immediate-threat and future-collision screening."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from debrisguard.core.elements import OrbitalElementSet
from debrisguard.core.objects import RiskLevel, StateVector, TrackedObject
from debrisguard.core.propagation import OrbitTrajectory, compute_semi_major_axis
from debrisguard.core.screening import (
    ConjunctionAlert,
    detect_immediate_threats,
    find_close_approaches,
    predict_future_collisions,
)
from debrisguard.utils.constants import EARTH_MU_KM3_S2

NOW = datetime(2024, 2, 14, 12, 0, tzinfo=timezone.utc)

# ~1270 km altitude, above the drag ceiling
MEAN_MOTION = 13.0


@pytest.fixture
def target() -> TrackedObject:
    return TrackedObject.spacecraft("ISS", [6800.0, 0.0, 0.0], [0.0, 7.66, 0.0], epoch=NOW)


def _debris_near(target: TrackedObject, offset_km: float, **kwargs) -> TrackedObject:
    return TrackedObject.debris(
        kwargs.pop("id", "DEB-1"),
        target.state.position_km + np.array([0.0, offset_km, 0.0]),
        [0.0, 7.6, 0.5],
        size_m=kwargs.pop("size_m", 0.5),
        epoch=NOW,
        **kwargs,
    )


def _circular_elements(mean_anomaly_deg: float = 0.0, inclination_deg: float = 0.0) -> OrbitalElementSet:
    return OrbitalElementSet(
        inclination_deg=inclination_deg, raan_deg=0.0, eccentricity=0.0, arg_perigee_deg=0.0,
        mean_anomaly_deg=mean_anomaly_deg, mean_motion_rev_per_day=MEAN_MOTION, epoch=NOW,
    )


@pytest.fixture
def orbit_target() -> TrackedObject:
    """A spacecraft whose circular projection matches the circular elements."""
    a = compute_semi_major_axis(MEAN_MOTION)
    v = math.sqrt(EARTH_MU_KM3_S2 / a)
    return TrackedObject.spacecraft("SAT", [a, 0.0, 0.0], [0.0, v, 0.0], epoch=NOW)


class TestImmediateThreats:
    def test_far_debris_no_alert(self, target):
        alerts = detect_immediate_threats([_debris_near(target, 100.0)], [target], threshold_km=25.0, now=NOW)
        assert alerts == []

    def test_close_debris_one_alert(self, target):
        alerts = detect_immediate_threats([_debris_near(target, 10.0)], [target], threshold_km=25.0, now=NOW)
        assert len(alerts) == 1
        alert = alerts[0]
        assert isinstance(alert, ConjunctionAlert)
        assert alert.debris_id == "DEB-1"
        assert alert.target_id == "ISS"
        assert alert.estimated_distance_km == pytest.approx(10.0)
        assert alert.risk_level is RiskLevel.HIGH
        assert 0.0 <= alert.probability <= 1.0
        assert alert.time_to_closest_approach_hours >= 0.0
        assert alert.created_at == NOW
        assert not alert.is_future
        assert alert.id == f"ALERT-ISS-DEB-1-{int(NOW.timestamp() * 1000)}"

    def test_maneuver_lead_time(self, target):
        alert = detect_immediate_threats([_debris_near(target, 3.0)], [target], now=NOW)[0]
        assert alert.risk_level is RiskLevel.CRITICAL
        m = alert.suggested_maneuver
        assert m is not None
        assert m.execution_time == NOW + timedelta(minutes=30)
        assert m.direction == "along-track"
        assert m.delta_v_m_s == pytest.approx(0.22)

    def test_threshold_inclusive(self, target):
        alerts = detect_immediate_threats([_debris_near(target, 25.0)], [target], threshold_km=25.0, now=NOW)
        assert len(alerts) == 1

    def test_no_maneuver_beyond_warning(self, target):
        alerts = detect_immediate_threats([_debris_near(target, 40.0)], [target], threshold_km=50.0, now=NOW)
        assert len(alerts) == 1
        assert alerts[0].suggested_maneuver is None

    def test_co_moving_infinite_tca(self, target):
        deb = TrackedObject.debris(
            "DEB-2", target.state.position_km + [0.0, 0.0, 5.0], target.state.velocity_km_s, epoch=NOW,
        )
        alert = detect_immediate_threats([deb], [target], now=NOW)[0]
        assert math.isinf(alert.time_to_closest_approach_hours)
        assert alert.probability == 0.0

    def test_all_pairs(self, target):
        other = TrackedObject.spacecraft("SAT", [6800.0, 5.0, 0.0], [0.0, 7.66, 0.0], epoch=NOW)
        debris = [_debris_near(target, 2.0, id="A"), _debris_near(target, 8.0, id="B"),
                  _debris_near(target, 500.0, id="C")]
        alerts = detect_immediate_threats(debris, [target, other], now=NOW)
        pairs = {(a.target_id, a.debris_id) for a in alerts}
        assert pairs == {("ISS", "A"), ("ISS", "B"), ("SAT", "A"), ("SAT", "B")}

    def test_wrong_roles_skipped(self, target):
        craft_as_debris = TrackedObject.spacecraft("SAT", [6800.0, 1.0, 0.0], epoch=NOW)
        assert detect_immediate_threats([craft_as_debris], [target], now=NOW) == []
        deb = _debris_near(target, 1.0)
        assert detect_immediate_threats([deb], [deb], now=NOW) == []

    def test_empty_inputs(self, target):
        assert detect_immediate_threats([], [target], now=NOW) == []
        assert detect_immediate_threats([_debris_near(target, 1.0)], [], now=NOW) == []


def _track(positions: list[list[float]], offsets: list[float]) -> OrbitTrajectory:
    states = [
        StateVector(position_km=np.array(p), velocity_km_s=None, epoch=NOW + timedelta(seconds=t))
        for p, t in zip(positions, offsets)
    ]
    return OrbitTrajectory(states=states, offsets_s=np.array(offsets), period_min=100.0,
                           apogee_km=500.0, perigee_km=500.0)


class TestFindCloseApproaches:
    def test_time_bucket_and_closest_sample(self):
        offsets = [0.0, 1800.0, 7200.0]
        target_track = _track([[7000.0, 0.0, 0.0]] * 3, offsets)
        debris_track = _track([[7100.0, 0.0, 0.0], [7010.0, 0.0, 0.0], [7005.0, 0.0, 0.0]], offsets)

        approaches = find_close_approaches(target_track, debris_track, threshold_km=25.0)

        assert [a.offset_s for a in approaches] == offsets
        assert [a.distance_km for a in approaches] == pytest.approx([10.0, 10.0, 5.0])
        assert approaches[2].debris_state is debris_track.states[2]

    def test_nothing_within_threshold(self):
        offsets = [0.0, 3600.0]
        target_track = _track([[7000.0, 0.0, 0.0]] * 2, offsets)
        debris_track = _track([[7100.0, 0.0, 0.0]] * 2, offsets)
        assert find_close_approaches(target_track, debris_track, threshold_km=25.0) == []


class TestPredictFutureCollisions:
    def test_shared_orbit_alerts_every_sample(self, orbit_target):
        deb = TrackedObject.debris("DEB-1", orbit_target.state.position_km, size_m=0.5,
                                   elements=_circular_elements(), epoch=NOW)
        alerts = predict_future_collisions([deb], [orbit_target], hours_ahead=2.0, step_count=4, now=NOW)

        assert len(alerts) == 5
        assert len({a.id for a in alerts}) == 5
        assert [a.time_to_closest_approach_hours for a in alerts] == pytest.approx([0.0, 0.5, 1.0, 1.5, 2.0])
        for alert in alerts:
            assert alert.is_future
            assert alert.id.startswith("FUTURE-ALERT-SAT-DEB-1-")
            assert alert.estimated_distance_km == pytest.approx(0.0, abs=1e-6)
            assert alert.risk_level is RiskLevel.CRITICAL
            assert alert.probability == pytest.approx(1.0)
            assert alert.suggested_maneuver is not None
            assert alert.suggested_maneuver.delta_v_m_s == pytest.approx(0.25)

        executions = [a.suggested_maneuver.execution_time for a in alerts]
        assert executions[0] == NOW
        assert executions[-1] == NOW + timedelta(hours=1)

    def test_opposite_phase_no_alert(self, orbit_target):
        deb = TrackedObject.debris("DEB-1", -orbit_target.state.position_km, size_m=0.5,
                                   elements=_circular_elements(mean_anomaly_deg=180.0), epoch=NOW)
        assert predict_future_collisions([deb], [orbit_target], hours_ahead=6.0, now=NOW) == []

    def test_debris_without_elements_skipped(self, orbit_target):
        no_elements = TrackedObject.debris("BARE", orbit_target.state.position_km, epoch=NOW)
        good = TrackedObject.debris("DEB-1", orbit_target.state.position_km, size_m=0.5,
                                    elements=_circular_elements(), epoch=NOW)
        alerts = predict_future_collisions([no_elements, good], [orbit_target],
                                           hours_ahead=1.0, step_count=2, now=NOW)
        assert alerts
        assert {a.debris_id for a in alerts} == {"DEB-1"}

    def test_propagation_failure_does_not_abort(self, orbit_target):
        deb = TrackedObject.debris("DEB-1", orbit_target.state.position_km,
                                   elements=_circular_elements(), epoch=NOW)
        assert predict_future_collisions([deb], [orbit_target], hours_ahead=1.0, step_count=0, now=NOW) == []

    def test_degenerate_target_skipped(self, orbit_target):
        bad = TrackedObject.spacecraft("BAD", [0.0, 0.0, 0.0], [0.0, 7.0, 0.0], epoch=NOW)
        deb = TrackedObject.debris("DEB-1", orbit_target.state.position_km, size_m=0.5,
                                   elements=_circular_elements(), epoch=NOW)
        alerts = predict_future_collisions([deb], [bad, orbit_target], hours_ahead=1.0, step_count=2, now=NOW)
        assert {a.target_id for a in alerts} == {"SAT"}

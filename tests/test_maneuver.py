from __future__ import annotations

from datetime import datetime, timezone

import numpy as np
import pytest

from debrisguard.core.maneuver import Maneuver, maneuver_direction, suggest_maneuver

WHEN = datetime(2024, 2, 14, 12, 30, tzinfo=timezone.utc)


class TestDirection:
    @pytest.mark.parametrize("vec,expected", [
        ([0.0, 0.0, 5.0], "anti-zenith"),
        ([1.0, 1.0, 5.0], "anti-zenith"),
        ([0.0, 0.0, -5.0], "zenith"),
        ([5.0, 1.0, 0.0], "cross-track"),
        ([-5.0, 1.0, 2.0], "cross-track"),
        ([1.0, 5.0, 0.0], "along-track"),
        ([1.0, -5.0, -2.0], "along-track"),
        ([0.0, 0.0, 0.0], "radial-out"),
    ])
    def test_dominant_axis(self, vec, expected):
        assert maneuver_direction(np.array(vec)) == expected


class TestSuggestManeuver:
    def test_outside_warning_distance(self):
        assert suggest_maneuver(np.array([30.0, 0.0, 0.0]), 30.0, WHEN) is None

    def test_at_warning_distance(self):
        m = suggest_maneuver(np.array([25.0, 0.0, 0.0]), 25.0, WHEN)
        assert m is not None
        assert m.delta_v_m_s == pytest.approx(0.25)

    def test_close_approach_uses_warning_distance(self):
        # safe = max(25, 20) = 25
        m = suggest_maneuver(np.array([10.0, 0.0, 0.0]), 10.0, WHEN)
        assert m == Maneuver(delta_v_m_s=pytest.approx(0.15), direction="cross-track", execution_time=WHEN)

    def test_safe_distance_doubles(self):
        # safe = max(30, 40) = 40
        m = suggest_maneuver(np.array([0.0, 0.0, -20.0]), 20.0, WHEN, warning_km=30.0)
        assert m is not None
        assert m.delta_v_m_s == pytest.approx(0.2)
        assert m.direction == "zenith"

    def test_custom_warning(self):
        assert suggest_maneuver(np.array([0.0, 40.0, 0.0]), 40.0, WHEN, warning_km=50.0) is not None
        assert suggest_maneuver(np.array([0.0, 40.0, 0.0]), 40.0, WHEN, warning_km=30.0) is None

    def test_non_negative(self):
        for d in [0.0, 1.0, 12.5, 24.9]:
            m = suggest_maneuver(np.array([d, 0.0, 0.0]), d, WHEN)
            assert m is not None and m.delta_v_m_s >= 0.0

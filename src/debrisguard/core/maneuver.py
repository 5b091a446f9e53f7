"""Suggested avoidance maneuvers.

The Δv figure is a heuristic scale for signaling urgency, not a solution of
the relative-motion problem.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

import numpy as np
from numpy.typing import NDArray

from debrisguard.utils.constants import (
    DELTA_V_SCALE,
    DIRECTION_DOMINANCE,
    WARNING_DISTANCE_KM,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Maneuver:
    """A suggested avoidance burn.

    Attributes:
        delta_v_m_s: Suggested Δv magnitude in m/s.
        direction: One of zenith, anti-zenith, cross-track, along-track,
            radial-out.
        execution_time: When to execute the burn (UTC).
    """

    delta_v_m_s: float
    direction: str
    execution_time: datetime


def maneuver_direction(relative_position_km: NDArray[np.float64]) -> str:
    """Pick a burn direction from the dominant axis of the approach vector."""
    rel = np.asarray(relative_position_km, dtype=np.float64)
    mag = float(np.linalg.norm(rel))
    if mag == 0.0:
        return "radial-out"

    uz = rel[2] / mag
    if uz > DIRECTION_DOMINANCE:
        return "anti-zenith"
    elif uz < -DIRECTION_DOMINANCE:
        return "zenith"
    elif abs(rel[0]) > abs(rel[1]):
        return "cross-track"
    else:
        return "along-track"


def suggest_maneuver(
    relative_position_km: NDArray[np.float64],
    current_distance_km: float,
    execution_time: datetime,
    warning_km: float = WARNING_DISTANCE_KM,
) -> Maneuver | None:
    """Suggest an avoidance burn for an approach inside the warning distance.

    Args:
        relative_position_km: Debris position minus target position.
        current_distance_km: Current separation in km.
        execution_time: When the burn should be executed.
        warning_km: Warning distance; no maneuver is suggested beyond it.

    Returns:
        A Maneuver, or None when the approach is outside the warning distance.
    """
    if current_distance_km > warning_km:
        return None

    safe_distance = max(warning_km, current_distance_km * 2)
    delta_v = abs(safe_distance - current_distance_km) / DELTA_V_SCALE
    direction = maneuver_direction(relative_position_km)

    logger.debug("Suggested %.3f m/s %s burn at %s", delta_v, direction, execution_time.isoformat())
    return Maneuver(delta_v_m_s=delta_v, direction=direction, execution_time=execution_time)

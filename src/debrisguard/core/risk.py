"""Risk tiers, collision-probability scores and closest-approach timing."""
from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from debrisguard.core.objects import RiskLevel
from debrisguard.utils.constants import (
    CRITICAL_DISTANCE_KM,
    CROSS_SECTION_WEIGHT,
    MAX_SIZE_FACTOR,
    MAX_VELOCITY_FACTOR,
    MIN_RELATIVE_SPEED_SQ,
    PROBABILITY_VELOCITY_NORM_KM_S,
    WARNING_DISTANCE_KM,
)

logger = logging.getLogger(__name__)


def size_multiplier(debris_size_m: float) -> float:
    """Scale applied to tier distances; larger debris widens every tier."""
    return math.log10(max(debris_size_m, 0.0) * 100 + 1)


def assess_risk_level(distance_km: float, debris_size_m: float) -> RiskLevel:
    """Classify a debris approach by distance relative to debris size.

    Args:
        distance_km: Separation in km.
        debris_size_m: Characteristic debris diameter in meters.

    Returns:
        The risk tier.
    """
    m = size_multiplier(debris_size_m)

    if distance_km < CRITICAL_DISTANCE_KM * m:
        return RiskLevel.CRITICAL
    elif distance_km < CRITICAL_DISTANCE_KM * 2 * m:
        return RiskLevel.HIGH
    elif distance_km < WARNING_DISTANCE_KM * m:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


def _clamp_probability(p: float) -> float:
    if math.isnan(p):
        return 0.0
    return max(0.0, min(1.0, p))


def collision_probability(
    distance_km: float,
    relative_velocity_km_s: float,
    debris_size_m: float,
) -> float:
    """Proximity score combining distance, closing speed and debris size.

    Exponential decay in distance, times a velocity factor normalized to
    typical orbital speeds, times a cross-section factor. Clamped to [0, 1].
    """
    base = math.exp(-max(distance_km, 0.0) / CRITICAL_DISTANCE_KM)
    velocity_factor = min(abs(relative_velocity_km_s) / PROBABILITY_VELOCITY_NORM_KM_S, MAX_VELOCITY_FACTOR)
    cross_section = math.pi * (debris_size_m / 2) ** 2
    size_factor = min(CROSS_SECTION_WEIGHT * cross_section, MAX_SIZE_FACTOR)
    return _clamp_probability(base * velocity_factor * size_factor)


def future_collision_probability(distance_km: float, debris_size_m: float) -> float:
    """Score for a predicted approach, where no closing speed is known."""
    size_factor = min(max(debris_size_m, 0.0) * 10, 1.0)
    distance_factor = math.exp(-max(distance_km, 0.0) / WARNING_DISTANCE_KM)
    return _clamp_probability(size_factor * distance_factor)


def _velocity(vel: NDArray[np.float64] | None) -> NDArray[np.float64]:
    return np.zeros(3) if vel is None else np.asarray(vel, dtype=np.float64)


def relative_speed(
    vel1: NDArray[np.float64] | None,
    vel2: NDArray[np.float64] | None,
) -> float:
    """Magnitude of the velocity difference; unknown velocities count as zero."""
    return float(np.linalg.norm(_velocity(vel2) - _velocity(vel1)))


def time_to_closest_approach(
    pos1: NDArray[np.float64],
    vel1: NDArray[np.float64] | None,
    pos2: NDArray[np.float64],
    vel2: NDArray[np.float64] | None,
) -> float:
    """Hours until closest approach under linear relative motion.

    Returns ``math.inf`` when the objects are co-moving and 0 when the
    closest approach is already past.
    """
    rel_pos = np.asarray(pos2, dtype=np.float64) - np.asarray(pos1, dtype=np.float64)
    rel_vel = _velocity(vel2) - _velocity(vel1)

    rel_speed_sq = float(rel_vel @ rel_vel)
    if rel_speed_sq < MIN_RELATIVE_SPEED_SQ:
        logger.debug("Relative speed %.3e km/s too small, no closest approach", math.sqrt(rel_speed_sq))
        return math.inf

    t_ca = -float(rel_pos @ rel_vel) / rel_speed_sq
    return max(0.0, t_ca / 3600.0)

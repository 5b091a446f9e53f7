"""Single-pair conjunction analysis with simple uncertainty inflation.

Not a covariance-based Pc: the probability is a Gaussian falloff of the miss
distance against the hard-body radius widened by a position uncertainty.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np

from debrisguard.core.objects import TrackedObject
from debrisguard.core.propagation import generate_circular_trajectory, generate_trajectory
from debrisguard.utils.constants import (
    ANALYSIS_TRAJECTORY_STEPS,
    BASE_POSITION_UNCERTAINTY_KM,
    BASE_VELOCITY_UNCERTAINTY_KM_S,
    DEFAULT_PREDICTION_HOURS,
    MAX_POSITION_UNCERTAINTY_KM,
)

logger = logging.getLogger(__name__)


@dataclass
class ConjunctionAnalysis:
    """Result of a single-pair conjunction analysis.

    Attributes:
        probability: Collision probability in [0, 1].
        miss_distance_km: Minimum separation over the window.
        tca: Time of closest approach (UTC).
        time_to_tca_hours: Hours from window start to closest approach.
        position_uncertainty_km: Assumed 1-sigma position uncertainty.
        velocity_uncertainty_km_s: Assumed 1-sigma velocity uncertainty.
    """

    probability: float
    miss_distance_km: float
    tca: datetime
    time_to_tca_hours: float
    position_uncertainty_km: float
    velocity_uncertainty_km_s: float


def position_uncertainty(altitude_km: float) -> float:
    """Position uncertainty in km, growing with altitude up to a cap."""
    return min(BASE_POSITION_UNCERTAINTY_KM + max(altitude_km, 0.0) / 10000, MAX_POSITION_UNCERTAINTY_KM)


def velocity_uncertainty(size_m: float) -> float:
    """Velocity uncertainty in km/s, growing with object size."""
    return BASE_VELOCITY_UNCERTAINTY_KM_S + max(size_m, 0.0) * 0.001


def hard_body_radius_km(size_m: float) -> float:
    """Radius in km of the circle with the debris cross-sectional area."""
    cross_section = math.pi * (size_m / 2) ** 2
    return math.sqrt(cross_section / math.pi) / 1000.0


def uncertainty_probability(miss_distance_km: float, hbr_km: float,
                            position_uncertainty_km: float) -> float:
    total_radius = hbr_km + position_uncertainty_km
    if total_radius <= 0:
        return 1.0 if miss_distance_km == 0 else 0.0
    p = math.exp(-(miss_distance_km ** 2) / (2 * total_radius ** 2))
    if math.isnan(p):
        return 0.0
    return max(0.0, min(1.0, p))


def analyze_conjunction(
    debris: TrackedObject,
    target: TrackedObject,
    hours_ahead: float = DEFAULT_PREDICTION_HOURS,
    step_count: int = ANALYSIS_TRAJECTORY_STEPS,
    now: datetime | None = None,
) -> ConjunctionAnalysis | None:
    """Find the closest approach of one debris/target pair and score it.

    Both objects are sampled on the same high-resolution grid; the global
    minimum separation is taken as the miss distance.

    Args:
        debris: Debris object; must carry an orbital element set.
        target: Target spacecraft, projected on a circular orbit.
        hours_ahead: Analysis window in hours.
        step_count: Number of propagation steps.
        now: Window start. Defaults to now (UTC).

    Returns:
        ConjunctionAnalysis, or None if either object cannot be propagated
        over the requested window.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    if not debris.can_propagate:
        logger.info("No conjunction analysis for %s: no orbital element set", debris.id)
        return None

    try:
        debris_track = generate_trajectory(debris, hours_ahead, step_count, start=now)
        target_track = generate_circular_trajectory(target, hours_ahead, step_count, start=now)
    except ValueError as e:
        logger.warning("Conjunction analysis %s/%s failed: %s", debris.id, target.id, e)
        return None

    separations = np.linalg.norm(debris_track.positions_km - target_track.positions_km, axis=1)
    idx = int(np.argmin(separations))
    miss_distance = float(separations[idx])
    offset_s = float(debris_track.offsets_s[idx])

    pos_unc = position_uncertainty(debris.altitude_km)
    vel_unc = velocity_uncertainty(debris.size_m)
    probability = uncertainty_probability(miss_distance, hard_body_radius_km(debris.size_m), pos_unc)

    logger.debug("Conjunction %s/%s: miss=%.3f km at +%.2f h, p=%.2e",
                 debris.id, target.id, miss_distance, offset_s / 3600.0, probability)
    return ConjunctionAnalysis(
        probability=probability,
        miss_distance_km=miss_distance,
        tca=now + timedelta(seconds=offset_s),
        time_to_tca_hours=offset_s / 3600.0,
        position_uncertainty_km=pos_unc,
        velocity_uncertainty_km_s=vel_unc,
    )

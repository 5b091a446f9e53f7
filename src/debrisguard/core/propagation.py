"""Two-body orbit propagation with a coarse atmospheric-drag correction."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np
from numpy.typing import NDArray

from debrisguard.core.objects import StateVector, TrackedObject
from debrisguard.utils.constants import (
    ATMOSPHERIC_DENSITY_FLOOR,
    ATMOSPHERIC_DENSITY_TABLE,
    DEFAULT_PREDICTION_HOURS,
    DEFAULT_TRAJECTORY_STEPS,
    DRAG_CEILING_KM,
    DRAG_COEFFICIENT,
    DRAG_LATERAL_RATIO,
    EARTH_MU_KM3_S2 as MU,
    EARTH_RADIUS_KM as RE,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    MAX_DECAY_FRACTION,
    SECONDS_PER_DAY,
)

logger = logging.getLogger(__name__)


@dataclass
class OrbitTrajectory:
    """Sampled trajectory of one object.

    Attributes:
        states: State vectors in time order.
        offsets_s: Elapsed seconds of each sample from the trajectory start.
        period_min: Orbital period in minutes.
        apogee_km: Apogee altitude in km.
        perigee_km: Perigee altitude in km.
    """

    states: list[StateVector]
    offsets_s: NDArray[np.float64]
    period_min: float
    apogee_km: float
    perigee_km: float

    @property
    def positions_km(self) -> NDArray[np.float64]:
        """Positions as an (n, 3) array."""
        return np.array([sv.position_km for sv in self.states], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.states)


def compute_semi_major_axis(mean_motion_rev_per_day: float) -> float:
    """Semi-major axis in km from mean motion via Kepler's third law.

    Raises:
        ValueError: If mean motion is not positive.
    """
    if not mean_motion_rev_per_day > 0:
        raise ValueError(f"Mean motion must be positive, got {mean_motion_rev_per_day!r}")
    n_rad_per_sec = mean_motion_rev_per_day * 2 * math.pi / SECONDS_PER_DAY
    return (MU / (n_rad_per_sec ** 2)) ** (1.0 / 3.0)


def orbital_period_s(semi_major_axis_km: float) -> float:
    return 2 * math.pi * math.sqrt(semi_major_axis_km ** 3 / MU)


def mean_to_true_anomaly(mean_anomaly_rad: float, eccentricity: float) -> float:
    """Solve Kepler's equation by Newton-Raphson and return true anomaly.

    Args:
        mean_anomaly_rad: Mean anomaly in radians.
        eccentricity: Orbital eccentricity, in [0, 1).

    Returns:
        True anomaly in radians.

    Raises:
        ValueError: If eccentricity is outside [0, 1).
    """
    if not 0.0 <= eccentricity < 1.0:
        raise ValueError(f"Eccentricity must be in [0, 1), got {eccentricity!r}")

    ecc_anomaly = mean_anomaly_rad
    for _ in range(KEPLER_MAX_ITERATIONS):
        residual = ecc_anomaly - eccentricity * math.sin(ecc_anomaly) - mean_anomaly_rad
        ecc_anomaly -= residual / (1 - eccentricity * math.cos(ecc_anomaly))
        if abs(residual) < KEPLER_TOLERANCE:
            break

    return 2 * math.atan2(
        math.sqrt(1 + eccentricity) * math.sin(ecc_anomaly / 2),
        math.sqrt(1 - eccentricity) * math.cos(ecc_anomaly / 2),
    )


def _perifocal_to_eci(inclination_deg: float, raan_deg: float, arg_perigee_deg: float) -> NDArray[np.float64]:
    """3-1-3 rotation matrix (RAAN, inclination, argument of perigee)."""
    cO = math.cos(math.radians(raan_deg))
    sO = math.sin(math.radians(raan_deg))
    ci = math.cos(math.radians(inclination_deg))
    si = math.sin(math.radians(inclination_deg))
    co = math.cos(math.radians(arg_perigee_deg))
    so = math.sin(math.radians(arg_perigee_deg))

    return np.array([
        [cO * co - sO * so * ci, -cO * so - sO * co * ci, sO * si],
        [sO * co + cO * so * ci, -sO * so + cO * co * ci, -cO * si],
        [so * si, co * si, ci],
    ])


def orbital_to_cartesian(
    a: float,
    e: float,
    inclination_deg: float,
    raan_deg: float,
    arg_perigee_deg: float,
    true_anomaly_rad: float,
) -> NDArray[np.float64]:
    """ECI position in km from classical elements."""
    r = a * (1 - e ** 2) / (1 + e * math.cos(true_anomaly_rad))
    pos_pqw = np.array([r * math.cos(true_anomaly_rad), r * math.sin(true_anomaly_rad), 0.0])
    return _perifocal_to_eci(inclination_deg, raan_deg, arg_perigee_deg) @ pos_pqw


def orbital_velocity(
    a: float,
    e: float,
    inclination_deg: float,
    raan_deg: float,
    arg_perigee_deg: float,
    true_anomaly_rad: float,
) -> NDArray[np.float64]:
    """ECI velocity in km/s from classical elements."""
    h = math.sqrt(MU * a * (1 - e ** 2))
    vel_pqw = np.array([
        -(MU / h) * math.sin(true_anomaly_rad),
        (MU / h) * (e + math.cos(true_anomaly_rad)),
        0.0,
    ])
    return _perifocal_to_eci(inclination_deg, raan_deg, arg_perigee_deg) @ vel_pqw


def atmospheric_density(altitude_km: float) -> float:
    """Step-table atmospheric density in kg/m³."""
    for upper_km, density in ATMOSPHERIC_DENSITY_TABLE:
        if altitude_km < upper_km:
            return density
    return ATMOSPHERIC_DENSITY_FLOOR


def drag_correction(
    position_km: NDArray[np.float64],
    velocity_km_s: NDArray[np.float64],
    size_m: float,
    elapsed_s: float,
) -> NDArray[np.float64]:
    """Displacement in km to subtract from a drag-free position.

    Radially outward with a small along-track component, so subtracting it
    pulls the object inward and lets it lag behind. Zero above the drag
    ceiling.
    """
    radius = float(np.linalg.norm(position_km))
    altitude = radius - RE
    if altitude > DRAG_CEILING_KM or radius == 0.0:
        return np.zeros(3)

    rho = atmospheric_density(altitude)
    cross_section = math.pi * (size_m / 2) ** 2
    drag_accel = 0.5 * rho * cross_section * DRAG_COEFFICIENT
    decay = drag_accel * elapsed_s ** 2 / 2
    factor = min(decay / 1000, max(altitude, 0.0) * MAX_DECAY_FRACTION)

    correction = factor * (position_km / radius)
    speed = float(np.linalg.norm(velocity_km_s))
    if speed > 0.0:
        correction = correction + DRAG_LATERAL_RATIO * factor * (velocity_km_s / speed)
    return correction


def _time_grid(hours_ahead: float, step_count: int) -> NDArray[np.float64]:
    if hours_ahead < 0:
        raise ValueError(f"hours_ahead must be non-negative, got {hours_ahead!r}")
    if step_count < 1:
        raise ValueError(f"step_count must be at least 1, got {step_count!r}")
    return np.linspace(0.0, hours_ahead * 3600.0, step_count + 1)


def generate_trajectory(
    obj: TrackedObject,
    hours_ahead: float = DEFAULT_PREDICTION_HOURS,
    step_count: int = DEFAULT_TRAJECTORY_STEPS,
    start: datetime | None = None,
) -> OrbitTrajectory:
    """Propagate an object's element set over a time horizon.

    Mean anomaly is advanced linearly with time, then each sample is
    converted to ECI and corrected for drag.

    Args:
        obj: Object carrying an orbital element set.
        hours_ahead: Horizon in hours.
        step_count: Number of steps; ``step_count + 1`` samples are returned.
        start: Time of the first sample. Defaults to now (UTC).

    Returns:
        OrbitTrajectory with period, apogee and perigee.

    Raises:
        ValueError: If the object has no element set or the grid is invalid.
    """
    elements = obj.elements
    if elements is None:
        logger.warning("Cannot propagate %s: no orbital element set", obj.id)
        raise ValueError(f"Object {obj.id} has no orbital element set")

    if start is None:
        start = datetime.now(timezone.utc)

    offsets = _time_grid(hours_ahead, step_count)
    a = compute_semi_major_axis(elements.mean_motion_rev_per_day)
    e = elements.eccentricity
    period = orbital_period_s(a)

    states = []
    for t in offsets:
        mean_anomaly_deg = (elements.mean_anomaly_deg + (t / period) * 360.0) % 360.0
        nu = mean_to_true_anomaly(math.radians(mean_anomaly_deg), e)
        args = (a, e, elements.inclination_deg, elements.raan_deg, elements.arg_perigee_deg, nu)
        pos = orbital_to_cartesian(*args)
        vel = orbital_velocity(*args)
        pos = pos - drag_correction(pos, vel, obj.size_m, float(t))
        states.append(StateVector(position_km=pos, velocity_km_s=vel, epoch=start + timedelta(seconds=float(t))))

    logger.debug("Propagated %s over %.1f h in %d steps", obj.id, hours_ahead, step_count)
    return OrbitTrajectory(
        states=states,
        offsets_s=offsets,
        period_min=period / 60.0,
        apogee_km=a * (1 + e) - RE,
        perigee_km=a * (1 - e) - RE,
    )


def generate_circular_trajectory(
    obj: TrackedObject,
    hours_ahead: float = DEFAULT_PREDICTION_HOURS,
    step_count: int = DEFAULT_TRAJECTORY_STEPS,
    start: datetime | None = None,
) -> OrbitTrajectory:
    """Project an object forward assuming a circular orbit about the z axis.

    Angular rate is |v| / |r| from the current state; the x/y position is
    rotated, z is held. An object with no known velocity stays put.

    Raises:
        ValueError: If the current position is at the origin or the grid is invalid.
    """
    if start is None:
        start = datetime.now(timezone.utc)

    offsets = _time_grid(hours_ahead, step_count)
    pos0 = obj.state.position_km
    r = float(np.linalg.norm(pos0))
    if r == 0.0:
        raise ValueError(f"Object {obj.id} has a zero position vector")

    vel0 = obj.state.velocity_km_s
    v = float(np.linalg.norm(vel0)) if vel0 is not None else 0.0
    omega = v / r

    states = []
    for t in offsets:
        angle = omega * t
        c, s = math.cos(angle), math.sin(angle)
        pos = np.array([
            pos0[0] * c - pos0[1] * s,
            pos0[0] * s + pos0[1] * c,
            pos0[2],
        ])
        vel = None
        if vel0 is not None:
            vel = np.array([
                vel0[0] * c - vel0[1] * s,
                vel0[0] * s + vel0[1] * c,
                vel0[2],
            ])
        states.append(StateVector(position_km=pos, velocity_km_s=vel, epoch=start + timedelta(seconds=float(t))))

    period = 2 * math.pi / omega if omega > 0 else math.inf
    return OrbitTrajectory(
        states=states,
        offsets_s=offsets,
        period_min=period / 60.0,
        apogee_km=r - RE,
        perigee_km=r - RE,
    )

"""Conjunction screening: find debris that is, or will be, close to a target."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np
from scipy.spatial.distance import cdist

from debrisguard.core.maneuver import Maneuver, suggest_maneuver
from debrisguard.core.objects import ObjectKind, RiskLevel, StateVector, TrackedObject
from debrisguard.core.propagation import (
    OrbitTrajectory,
    generate_circular_trajectory,
    generate_trajectory,
)
from debrisguard.core.risk import (
    assess_risk_level,
    collision_probability,
    future_collision_probability,
    relative_speed,
    time_to_closest_approach,
)
from debrisguard.utils.constants import (
    DEFAULT_PREDICTION_HOURS,
    DEFAULT_TRAJECTORY_STEPS,
    FUTURE_MANEUVER_LEAD_S,
    IMMEDIATE_MANEUVER_LEAD_S,
    TIME_BUCKET_S,
    WARNING_DISTANCE_KM,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConjunctionAlert:
    """A close approach between a debris object and a target.

    Attributes:
        id: Composite identifier, stable for a given pair and evaluation time.
        debris_id: Identifier of the debris object.
        target_id: Identifier of the target spacecraft.
        risk_level: Risk tier of the approach.
        estimated_distance_km: Separation at the evaluated instant.
        time_to_closest_approach_hours: Hours until closest approach,
            non-negative, or ``math.inf`` for co-moving objects.
        probability: Collision probability score in [0, 1].
        suggested_maneuver: Suggested avoidance burn, if any.
        created_at: When the alert was produced.
        is_future: True for alerts from the prediction scan.
    """

    id: str
    debris_id: str
    target_id: str
    risk_level: RiskLevel
    estimated_distance_km: float
    time_to_closest_approach_hours: float
    probability: float
    suggested_maneuver: Maneuver | None
    created_at: datetime
    is_future: bool = False


@dataclass
class CloseApproach:
    """A pair of time-aligned samples within the warning distance."""

    distance_km: float
    offset_s: float
    target_state: StateVector
    debris_state: StateVector


def _with_role(objects: list[TrackedObject], kind: ObjectKind) -> list[TrackedObject]:
    kept = []
    for obj in objects:
        if obj.kind is kind:
            kept.append(obj)
        else:
            logger.warning("Skipping %s: expected %s, got %s", obj.id, kind.value, obj.kind.value)
    return kept


def detect_immediate_threats(
    debris: list[TrackedObject],
    targets: list[TrackedObject],
    threshold_km: float = WARNING_DISTANCE_KM,
    now: datetime | None = None,
    warning_km: float = WARNING_DISTANCE_KM,
) -> list[ConjunctionAlert]:
    """Alert on every debris object currently within ``threshold_km`` of a target.

    Args:
        debris: Debris objects.
        targets: Maneuverable spacecraft to protect.
        threshold_km: Alert distance in km.
        now: Evaluation time. Defaults to now (UTC).
        warning_km: Distance inside which an avoidance maneuver is suggested.

    Returns:
        One alert per (target, debris) pair within the threshold.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    debris = _with_role(debris, ObjectKind.DEBRIS)
    targets = _with_role(targets, ObjectKind.SPACECRAFT)
    if not debris or not targets:
        return []

    target_pos = np.array([t.state.position_km for t in targets])
    debris_pos = np.array([d.state.position_km for d in debris])
    distances = cdist(target_pos, debris_pos)

    stamp = int(now.timestamp() * 1000)
    execution_time = now + timedelta(seconds=IMMEDIATE_MANEUVER_LEAD_S)
    alerts: list[ConjunctionAlert] = []

    for i, craft in enumerate(targets):
        for j, deb in enumerate(debris):
            distance = float(distances[i, j])
            if distance > threshold_km:
                continue

            rel_vel = relative_speed(craft.state.velocity_km_s, deb.state.velocity_km_s)
            alerts.append(
                ConjunctionAlert(
                    id=f"ALERT-{craft.id}-{deb.id}-{stamp}",
                    debris_id=deb.id,
                    target_id=craft.id,
                    risk_level=assess_risk_level(distance, deb.size_m),
                    estimated_distance_km=distance,
                    time_to_closest_approach_hours=time_to_closest_approach(
                        craft.state.position_km,
                        craft.state.velocity_km_s,
                        deb.state.position_km,
                        deb.state.velocity_km_s,
                    ),
                    probability=collision_probability(distance, rel_vel, deb.size_m),
                    suggested_maneuver=suggest_maneuver(
                        deb.state.position_km - craft.state.position_km,
                        distance,
                        execution_time,
                        warning_km=warning_km,
                    ),
                    created_at=now,
                )
            )

    logger.info("detect_immediate_threats: %d alerts from %d targets x %d debris",
                len(alerts), len(targets), len(debris))
    return alerts


def find_close_approaches(
    target_track: OrbitTrajectory,
    debris_track: OrbitTrajectory,
    threshold_km: float = WARNING_DISTANCE_KM,
    time_bucket_s: float = TIME_BUCKET_S,
) -> list[CloseApproach]:
    """Find time-aligned sample pairs within ``threshold_km``.

    Samples are compared when their offsets differ by less than
    ``time_bucket_s``. For each target sample only the closest qualifying
    debris sample is kept.
    """
    distances = cdist(target_track.positions_km, debris_track.positions_km)
    dt = np.abs(target_track.offsets_s[:, None] - debris_track.offsets_s[None, :])
    masked = np.where((dt < time_bucket_s) & (distances <= threshold_km), distances, np.inf)

    approaches = []
    for i in np.flatnonzero(np.isfinite(masked).any(axis=1)):
        j = int(np.argmin(masked[i]))
        approaches.append(
            CloseApproach(
                distance_km=float(masked[i, j]),
                offset_s=float(target_track.offsets_s[i]),
                target_state=target_track.states[i],
                debris_state=debris_track.states[j],
            )
        )
    return approaches


def predict_future_collisions(
    debris: list[TrackedObject],
    targets: list[TrackedObject],
    hours_ahead: float = DEFAULT_PREDICTION_HOURS,
    step_count: int = DEFAULT_TRAJECTORY_STEPS,
    warning_km: float = WARNING_DISTANCE_KM,
    now: datetime | None = None,
) -> list[ConjunctionAlert]:
    """Propagate debris and targets forward and alert on predicted approaches.

    Debris follows its element set; targets are assumed near-circular.
    Debris without an element set, or whose propagation fails, is skipped.

    Args:
        debris: Debris objects.
        targets: Maneuverable spacecraft to protect.
        hours_ahead: Prediction horizon in hours.
        step_count: Propagation steps per trajectory.
        warning_km: Distance below which a predicted approach is reported.
        now: Start of the prediction window. Defaults to now (UTC).

    Returns:
        Future alerts, at most one per target sample per debris object.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    debris = _with_role(debris, ObjectKind.DEBRIS)
    targets = _with_role(targets, ObjectKind.SPACECRAFT)

    debris_tracks: dict[str, OrbitTrajectory] = {}
    for deb in debris:
        if not deb.can_propagate:
            logger.info("Skipping %s in prediction: no orbital element set", deb.id)
            continue
        try:
            debris_tracks[deb.id] = generate_trajectory(deb, hours_ahead, step_count, start=now)
        except ValueError as exc:
            logger.warning("Failed to predict collisions for %s: %s", deb.id, exc)

    alerts: list[ConjunctionAlert] = []
    for craft in targets:
        try:
            craft_track = generate_circular_trajectory(craft, hours_ahead, step_count, start=now)
        except ValueError as exc:
            logger.warning("Failed to project target %s: %s", craft.id, exc)
            continue

        for deb in debris:
            debris_track = debris_tracks.get(deb.id)
            if debris_track is None:
                continue

            for approach in find_close_approaches(craft_track, debris_track, warning_km):
                lead_s = max(0.0, approach.offset_s - FUTURE_MANEUVER_LEAD_S)
                alerts.append(
                    ConjunctionAlert(
                        id=f"FUTURE-ALERT-{craft.id}-{deb.id}-{int(approach.offset_s)}",
                        debris_id=deb.id,
                        target_id=craft.id,
                        risk_level=assess_risk_level(approach.distance_km, deb.size_m),
                        estimated_distance_km=approach.distance_km,
                        time_to_closest_approach_hours=approach.offset_s / 3600.0,
                        probability=future_collision_probability(approach.distance_km, deb.size_m),
                        suggested_maneuver=suggest_maneuver(
                            approach.debris_state.position_km - approach.target_state.position_km,
                            approach.distance_km,
                            now + timedelta(seconds=lead_s),
                            warning_km=warning_km,
                        ),
                        created_at=now,
                        is_future=True,
                    )
                )

    logger.info("predict_future_collisions: %d alerts over %.0fh for %d targets, %d propagated debris",
                len(alerts), hours_ahead, len(targets), len(debris_tracks))
    return alerts

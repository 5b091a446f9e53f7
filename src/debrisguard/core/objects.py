"""Tracked objects and their state vectors.

Debris and spacecraft share position, velocity and altitude fields; what
differs between them lives in a payload, one of :class:`DebrisPayload` or
:class:`SpacecraftPayload`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from debrisguard.core.elements import OrbitalElementSet
from debrisguard.utils.constants import EARTH_RADIUS_KM as RE


class RiskLevel(Enum):
    """Debris risk tiers, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


class ObjectKind(Enum):
    """Role an object plays in a screening run."""

    DEBRIS = "debris"
    SPACECRAFT = "spacecraft"


@dataclass
class StateVector:
    """Position and optional velocity in an Earth-centered inertial frame.

    Attributes:
        position_km: [x, y, z] position in km.
        velocity_km_s: [vx, vy, vz] velocity in km/s, or None if unknown.
        epoch: Time of this state vector.
    """

    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64] | None  # shape (3,)
    epoch: datetime

    @property
    def radius_km(self) -> float:
        return float(np.linalg.norm(self.position_km))

    @property
    def altitude_km(self) -> float:
        return self.radius_km - RE


@dataclass(frozen=True)
class DebrisPayload:
    risk_level: RiskLevel = RiskLevel.LOW
    risk_score: float = 0.0  # 0-100


@dataclass(frozen=True)
class SpacecraftPayload:
    craft_type: str = "satellite"  # ISS/satellite/spacecraft
    is_active: bool = True


@dataclass(frozen=True)
class CloseApproachSummary:
    target_id: str
    distance_km: float
    time: datetime


@dataclass
class TrackedObject:
    """A debris fragment or spacecraft known to the tracker.

    Attributes:
        id: Catalog identifier.
        name: Display name.
        size_m: Characteristic diameter in meters.
        mass_kg: Mass in kg.
        state: Current state vector.
        payload: Debris- or spacecraft-specific data.
        elements: Orbital element set; without one the object cannot be
            propagated, only screened at the current instant.
        inclination_deg: Orbital inclination.
        eccentricity: Orbital eccentricity.
        last_update: When the state was last refreshed.
        next_close_approach: Summary of the next known approach, if any.
    """

    id: str
    name: str
    size_m: float
    mass_kg: float
    state: StateVector
    payload: DebrisPayload | SpacecraftPayload
    elements: OrbitalElementSet | None = None
    inclination_deg: float = 0.0
    eccentricity: float = 0.0
    last_update: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    next_close_approach: CloseApproachSummary | None = None

    @property
    def kind(self) -> ObjectKind:
        match self.payload:
            case DebrisPayload():
                return ObjectKind.DEBRIS
            case SpacecraftPayload():
                return ObjectKind.SPACECRAFT
        raise TypeError(f"Unknown payload for object {self.id}: {self.payload!r}")

    @property
    def altitude_km(self) -> float:
        """Current altitude above mean Earth radius, from the latest state."""
        return self.state.altitude_km

    @property
    def can_propagate(self) -> bool:
        return self.elements is not None

    @classmethod
    def debris(
        cls,
        id: str,
        position_km,
        velocity_km_s=None,
        *,
        name: str = "",
        size_m: float = 0.1,
        mass_kg: float = 1.0,
        elements: OrbitalElementSet | None = None,
        risk_level: RiskLevel = RiskLevel.LOW,
        risk_score: float = 0.0,
        epoch: datetime | None = None,
    ) -> TrackedObject:
        """Build a debris object, deriving orbital parameters from its state."""
        return cls._build(
            id, name or id, size_m, mass_kg, position_km, velocity_km_s, epoch,
            DebrisPayload(risk_level=risk_level, risk_score=risk_score),
            elements,
        )

    @classmethod
    def spacecraft(
        cls,
        id: str,
        position_km,
        velocity_km_s=None,
        *,
        name: str = "",
        size_m: float = 10.0,
        mass_kg: float = 1000.0,
        elements: OrbitalElementSet | None = None,
        craft_type: str = "satellite",
        is_active: bool = True,
        epoch: datetime | None = None,
    ) -> TrackedObject:
        """Build a spacecraft object, deriving orbital parameters from its state."""
        return cls._build(
            id, name or id, size_m, mass_kg, position_km, velocity_km_s, epoch,
            SpacecraftPayload(craft_type=craft_type, is_active=is_active),
            elements,
        )

    @classmethod
    def _build(cls, id, name, size_m, mass_kg, position_km, velocity_km_s,
               epoch, payload, elements) -> TrackedObject:
        if epoch is None:
            epoch = datetime.now(timezone.utc)
        state = StateVector(
            position_km=np.asarray(position_km, dtype=np.float64),
            velocity_km_s=(
                None if velocity_km_s is None
                else np.asarray(velocity_km_s, dtype=np.float64)
            ),
            epoch=epoch,
        )
        if elements is not None:
            inclination, eccentricity = elements.inclination_deg, elements.eccentricity
        else:
            inclination, eccentricity = _inclination_from_state(state), 0.0
        return cls(
            id=id,
            name=name,
            size_m=size_m,
            mass_kg=mass_kg,
            state=state,
            payload=payload,
            elements=elements,
            inclination_deg=inclination,
            eccentricity=eccentricity,
            last_update=epoch,
        )


def _inclination_from_state(state: StateVector) -> float:
    """Inclination of the instantaneous orbit plane, 0 when undetermined."""
    if state.velocity_km_s is None:
        return 0.0
    h = np.cross(state.position_km, state.velocity_km_s)
    h_norm = float(np.linalg.norm(h))
    if h_norm == 0.0:
        return 0.0
    return math.degrees(math.acos(max(-1.0, min(1.0, h[2] / h_norm))))

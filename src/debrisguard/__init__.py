"""
debrisguard: Debris tracking and conjunction alerts for Python.

Propagates debris orbits from element sets, screens them against
maneuverable spacecraft, and scores close approaches with a risk tier,
a collision-probability estimate and a suggested avoidance maneuver.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from debrisguard.core.elements import OrbitalElementSet
from debrisguard.core.objects import (
    CloseApproachSummary,
    DebrisPayload,
    ObjectKind,
    RiskLevel,
    SpacecraftPayload,
    StateVector,
    TrackedObject,
)
from debrisguard.core.propagation import (
    OrbitTrajectory,
    generate_circular_trajectory,
    generate_trajectory,
)
from debrisguard.core.risk import (
    assess_risk_level,
    collision_probability,
    time_to_closest_approach,
)
from debrisguard.core.maneuver import Maneuver, suggest_maneuver
from debrisguard.core.screening import (
    ConjunctionAlert,
    detect_immediate_threats,
    predict_future_collisions,
)
from debrisguard.core.probability import ConjunctionAnalysis, analyze_conjunction

__all__ = [
    "__version__",
    "OrbitalElementSet",
    "CloseApproachSummary",
    "DebrisPayload",
    "ObjectKind",
    "RiskLevel",
    "SpacecraftPayload",
    "StateVector",
    "TrackedObject",
    "OrbitTrajectory",
    "generate_trajectory",
    "generate_circular_trajectory",
    "assess_risk_level",
    "collision_probability",
    "time_to_closest_approach",
    "Maneuver",
    "suggest_maneuver",
    "ConjunctionAlert",
    "detect_immediate_threats",
    "predict_future_collisions",
    "ConjunctionAnalysis",
    "analyze_conjunction",
]

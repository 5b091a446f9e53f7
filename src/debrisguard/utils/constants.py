from __future__ import annotations

"""Physical constants and default thresholds for propagation and screening.

Distances in km, times in seconds unless the name says otherwise.
"""

# --- Earth parameters ---
EARTH_RADIUS_KM: float = 6371.0
"""Mean radius of Earth in km, used for all altitude figures."""

EARTH_MU_KM3_S2: float = 398600.4418
"""Earth gravitational parameter (GM) in km³/s²."""

SECONDS_PER_DAY: float = 86400.0

# --- Drag model ---
DRAG_COEFFICIENT: float = 2.2
"""Drag coefficient assumed for all tracked debris."""

DRAG_CEILING_KM: float = 800.0
"""Altitude above which the drag correction is zero."""

MAX_DECAY_FRACTION: float = 0.001
"""Cap on drag displacement as a fraction of current altitude."""

DRAG_LATERAL_RATIO: float = 0.1
"""Along-track lag as a fraction of the radial drag displacement."""

ATMOSPHERIC_DENSITY_TABLE: tuple[tuple[float, float], ...] = (
    (200.0, 2.5e-11),
    (300.0, 1.7e-12),
    (400.0, 3.0e-13),
    (500.0, 7.0e-14),
    (600.0, 2.0e-14),
    (700.0, 7.0e-15),
    (800.0, 3.0e-15),
)
"""(upper altitude bound km, density kg/m³) bands, checked in order."""

ATMOSPHERIC_DENSITY_FLOOR: float = 1.0e-15
"""Density in kg/m³ above the last band of the table."""

# --- Kepler solver ---
KEPLER_MAX_ITERATIONS: int = 10
KEPLER_TOLERANCE: float = 1e-12

# --- Screening thresholds ---
CRITICAL_DISTANCE_KM: float = 5.0
"""Base distance for the critical tier, scaled by debris size."""

WARNING_DISTANCE_KM: float = 25.0
"""Warning distance; also the default immediate-threat threshold."""

DEFAULT_PREDICTION_HOURS: float = 24.0
"""Default forward horizon for future-collision prediction."""

DEFAULT_TRAJECTORY_STEPS: int = 100
"""Default number of propagation steps per trajectory."""

ANALYSIS_TRAJECTORY_STEPS: int = 1000
"""Step count used by single-pair conjunction analysis."""

TIME_BUCKET_S: float = 3600.0
"""Max offset between samples compared in the future-prediction scan."""

MIN_RELATIVE_SPEED_SQ: float = 1e-10
"""Squared relative speed (km²/s²) under which objects are co-moving."""

# --- Probability model ---
PROBABILITY_VELOCITY_NORM_KM_S: float = 15.0
MAX_VELOCITY_FACTOR: float = 2.0
CROSS_SECTION_WEIGHT: float = 10.0
MAX_SIZE_FACTOR: float = 10.0

BASE_POSITION_UNCERTAINTY_KM: float = 0.1
MAX_POSITION_UNCERTAINTY_KM: float = 5.0
BASE_VELOCITY_UNCERTAINTY_KM_S: float = 0.01

# --- Maneuver heuristic ---
DELTA_V_SCALE: float = 100.0
"""Divisor turning separation shortfall (km) into a suggested Δv (m/s)."""

DIRECTION_DOMINANCE: float = 0.7
"""Unit-vector z component above which the maneuver is radial."""

IMMEDIATE_MANEUVER_LEAD_S: float = 30 * 60.0
"""Execution delay for immediate-threat maneuvers."""

FUTURE_MANEUVER_LEAD_S: float = 3600.0
"""How long before a predicted approach a preventive burn is scheduled."""
